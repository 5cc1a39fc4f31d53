"""Install the artifact and its manifest into the host's extension directory."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from zedpack.errors import InstallError, InstallStep
from zedpack.stages.base import InstalledExtension


def install(artifact: Path, manifest: Path, target_dir: Path) -> InstalledExtension:
    """Create *target_dir* if needed, then copy artifact and manifest into it.

    The two copies are not atomic as a pair: if the manifest copy fails, the
    artifact stays installed. Rerunning install repairs that state.
    """
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise InstallError(
            f"Failed to create install directory {target_dir}: {exc.strerror or exc}",
            step="mkdir",
            hint="Check permissions on the extensions directory or override it.",
            context={"path": str(target_dir)},
        ) from exc

    artifact_path = _copy_into(artifact, target_dir, step="copy_artifact")
    manifest_path = _copy_into(manifest, target_dir, step="copy_manifest")
    return InstalledExtension(
        directory=target_dir,
        artifact_path=artifact_path,
        manifest_path=manifest_path,
    )


def _copy_into(source: Path, target_dir: Path, *, step: InstallStep) -> Path:
    destination = target_dir / source.name
    if not source.is_file():
        if step == "copy_artifact":
            hint = "Run build before install."
        else:
            hint = "Create the manifest next to the crate or point --manifest at it."
        raise InstallError(
            f"Cannot install {source}: file does not exist.",
            step=step,
            hint=hint,
            context={"source": str(source), "destination": str(destination)},
        )
    # Write beside the destination and rename over it so a reader never sees
    # a truncated file.
    tmp_path: Path | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{source.name}.", dir=target_dir)
        os.close(fd)
        tmp_path = Path(tmp_name)
        shutil.copyfile(source, tmp_path)
        os.replace(tmp_path, destination)
    except OSError as exc:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise InstallError(
            f"Failed to copy {source} to {destination}: {exc.strerror or exc}",
            step=step,
            context={"source": str(source), "destination": str(destination)},
        ) from exc
    return destination
