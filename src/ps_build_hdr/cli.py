"""Build tone-mapped composites from bracketed exposures.

With no FILENAME arguments every entry of the current directory is taken, in
name order, and processed in sets of NUMBER (default 3); leftover files that
do not fill a set are ignored, so keep only the photos in that directory.
With FILENAME arguments all of them form one set.

Each set is merged into a radiance map with luminance-hdr-cli, tone-mapped
with the ashikhmin and mantiuk08 operators, and the two results are layered
in GIMP (ashikhmin at 40% soft light over mantiuk08). The composite is saved
in the current directory as <first input>_ps-hdr.jpg.

Requires luminance-hdr-cli and gimp. align_image_stack (Hugin) enables
feature-based alignment and exiftool keeps the EXIF data of the first input.
Tool output is appended to ~/.ps-build-hdr.log.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from ps_build_hdr import __version__
from ps_build_hdr.config import load_config
from ps_build_hdr.errors import ConfigError, PipelineError, StageFailure
from ps_build_hdr.pipeline import PipelineOptions
from ps_build_hdr.runlog import RunLog
from ps_build_hdr.service import run_directory_scan, run_explicit
from ps_build_hdr.tools.base import format_command
from ps_build_hdr.tools.resolver import resolve_tools
from ps_build_hdr.utils.logging_utils import configure_logging


logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ps-build-hdr",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-h", "--help", "--usage", action="help", help="Show this documentation and exit")
    parser.add_argument(
        "-n",
        "--number",
        type=_positive_int,
        default=None,
        help="Images per set in directory mode (default: 3)",
    )
    parser.add_argument(
        "-k",
        "--keep-hdr",
        action="store_true",
        default=None,
        help="Keep the merged radiance map as <first input>_ps-hdr.hdr",
    )
    parser.add_argument("--config", default=None, help="Optional YAML config")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("filenames", nargs="*", metavar="FILENAME", help="Images forming one set")
    return parser


def _report_failure(exc: PipelineError) -> None:
    print(f"error: {exc}", file=sys.stderr)
    if isinstance(exc, StageFailure):
        print(f"  command: {format_command(exc.command)}", file=sys.stderr)
        if exc.log_path is not None:
            print(f"  see the log for details: {exc.log_path}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ConfigError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    configure_logging(config.log_level, config.log_file)

    number = args.number if args.number is not None else config.batch.number
    keep_hdr = bool(args.keep_hdr) if args.keep_hdr is not None else config.batch.keep_hdr
    output_dir = config.batch.output_dir or Path.cwd()
    run_log = RunLog(config.run_log)
    options = PipelineOptions(keep_intermediate=keep_hdr)

    try:
        tools = resolve_tools(config.tools)
        if args.filenames:
            files = [Path(name) for name in args.filenames]
            outputs = run_explicit(files, tools, run_log, options, output_dir=output_dir)
        else:
            outputs = run_directory_scan(Path.cwd(), number, tools, run_log, options, output_dir=output_dir)
    except PipelineError as exc:
        logger.debug("aborting run", exc_info=True)
        _report_failure(exc)
        return 1
    except Exception as exc:
        logger.exception("fatal error")
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for out in outputs:
        print(str(out))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
