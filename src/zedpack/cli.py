"""zedpack command line: ``setup``, ``build``, ``install`` and ``clean``."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from zedpack.config import load_config
from zedpack.errors import ConfigError, ExternalCommandError, ZedpackError
from zedpack.observability import StructuredLogger
from zedpack.pipeline import Pipeline

COMMANDS = {
    "setup": "Install the Rust compilation target.",
    "build": "Provision the target, compile the crate and copy the module to its output path.",
    "install": "Build, then copy the module and manifest into the editor's extensions directory.",
    "clean": "Run cargo clean and remove the output module.",
}

DEFAULT_COMMAND = "build"

# Context keys naming the path or command a failure is about, most specific first.
_DETAIL_KEYS = ("command", "expected", "path", "destination", "source")


def create_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--project-dir", type=Path, help="Crate root (default: current directory).")
    common.add_argument("--target", help="Rust target triple, e.g. wasm32-wasip1.")
    common.add_argument("--crate-name", help="Crate library name as cargo emits it.")
    common.add_argument("--output", dest="output_filename", help="Output module filename.")
    common.add_argument("--extension-id", help="Extension identifier (install subdirectory).")
    common.add_argument("--manifest", dest="manifest_filename", help="Manifest filename.")
    common.add_argument("--build-root", type=Path, help="Cargo target directory.")
    common.add_argument("--extensions-dir", type=Path, help="Editor's installed-extensions directory.")
    common.add_argument(
        "--locked",
        action="store_const",
        const=True,
        default=None,
        help="Pass --locked to cargo build.",
    )
    common.add_argument("--report", type=Path, help="Write a build report (.json or .cbor).")
    common.add_argument("--log-json", type=Path, help="Write structured log records as JSON lines.")
    common.add_argument("-q", "--quiet", action="store_true", help="Only print errors.")

    parser = argparse.ArgumentParser(
        prog="zedpack",
        description="Build and install a compiled editor extension module.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, parents=[common], help=help_text, description=help_text)
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    args = create_parser().parse_args(_with_default_command(argv))
    logger = StructuredLogger(stream=None if args.quiet else stdout)

    try:
        config = load_config(
            {
                "project_dir": args.project_dir,
                "target": args.target,
                "crate_name": args.crate_name,
                "output_filename": args.output_filename,
                "extension_id": args.extension_id,
                "manifest_filename": args.manifest_filename,
                "build_root": args.build_root,
                "extensions_dir": args.extensions_dir,
                "locked": args.locked,
            }
        )
    except ConfigError as exc:
        _report_error(exc, stderr)
        return exc.exit_code

    pipeline = Pipeline(config=config, logger=logger)
    try:
        if args.command == "setup":
            pipeline.setup()
        elif args.command == "build":
            report = pipeline.build()
            if args.report is not None:
                report.write(args.report)
        elif args.command == "install":
            report = pipeline.install()
            if args.report is not None:
                report.write(args.report)
        else:
            pipeline.clean()
    except ZedpackError as exc:
        _report_error(exc, stderr)
        return exc.exit_code
    finally:
        if args.log_json is not None:
            logger.to_json_lines(args.log_json)
    return 0


def _with_default_command(argv: Sequence[str] | None) -> list[str]:
    """Run ``build`` when no command is named, like a bare ``make``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and (args[0] in COMMANDS or args[0] in {"-h", "--help"}):
        return args
    return [DEFAULT_COMMAND, *args]


def _report_error(exc: ZedpackError, stream: TextIO) -> None:
    if isinstance(exc, ExternalCommandError) and exc.diagnostics:
        print(exc.diagnostics, file=stream)
    detail = next((exc.context[key] for key in _DETAIL_KEYS if exc.context.get(key)), "")
    line = f"error: {exc.stage} failed: {exc.message}"
    if detail and detail not in exc.message:
        line += f" ({detail})"
    print(line, file=stream)
    if exc.hint:
        print(f"hint: {exc.hint}", file=stream)
