"""Copy the raw compiler output to its stable output path."""

from __future__ import annotations

import shutil
from pathlib import Path

from zedpack.errors import RelocateError
from zedpack.stages.base import BuildArtifact, OutputArtifact


def relocate(source: BuildArtifact, destination: Path) -> OutputArtifact:
    """Copy *source* to *destination*, overwriting; *source* is left in place."""
    if not source.path.is_file():
        raise RelocateError(
            f"Compiled artifact not found at {source.path}",
            reason="missing_source",
            hint=_missing_source_hint(source.path),
            context={"expected": str(source.path), "target": source.target},
        )
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source.path, destination)
    except OSError as exc:
        raise RelocateError(
            f"Failed to copy {source.path} to {destination}: {exc.strerror or exc}",
            reason="copy_failed",
            context={"source": str(source.path), "destination": str(destination)},
        ) from exc
    return OutputArtifact(path=destination)


def _missing_source_hint(expected: Path) -> str:
    release_dir = expected.parent
    if not release_dir.is_dir():
        return f"No build output directory at {release_dir}; did the build run for this target?"
    siblings = sorted(
        path.name
        for path in release_dir.iterdir()
        if path.is_file() and path.suffix == expected.suffix
    )
    if not siblings:
        return "The build produced no artifact with this extension; check the crate type."
    return (
        "The crate name may not match the built artifact. "
        f"Found: {', '.join(siblings)}"
    )
