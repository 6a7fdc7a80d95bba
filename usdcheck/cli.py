"""
usdcheck command line

Validates a USD file by checking geometry, shaders, layer structure and variants,
then prints one result line per check and a summary.

Usage:
  usdcheck <path-to-usd-file> [options]
  python -m usdcheck scene.usda -skip-variants -output report.txt

Exit status is 1 for invalid arguments and 0 for every completed run, whatever the
check results; the verdict is in the report.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional, Sequence, Tuple

from .core.runner import CheckRunner
from .core.types import CheckId, RunConfig, RunConfigError
from .utils.settings import configure_logging, load_settings

logger = logging.getLogger(__name__)

HELP_TEXT = """
Usage: usdcheck <path-to-usd-file> [options]

Options:
  -only-geometry    Run only geometry validation
  -only-shaders     Run only shader validation
  -only-layers      Run only layer structure validation
  -only-variants    Run only variant validation
  -skip-geometry    Skip geometry validation
  -skip-shaders     Skip shader validation
  -skip-layers      Skip layer structure validation
  -skip-variants    Skip variant validation
  -output <path>    Export results to specified file path
  -help             Display this help message

Note:
- 'only' flags and 'skip' flags are mutually exclusive
- Multiple 'skip' flags can be combined
- Only one 'only' flag can be used at a time
"""

INTRO_TEXT = r"""
   ___      ___       ________      _________
  |   |    |   |    /   ___   \    |         \
  |   |    |   |   |   /   \___|   |    ___   \
  |   |    |   |   |   \______     |   |   |   |
  |   |    |   |    \______   \    |   |   |   |
  |   |____|   |    ___    \   \   |   |___|   |
  |            |   |   \___/   |   |          /
   \__________/     \_________/    |_________/

Welcome to usdcheck!
This program validates USD files for geometry, shaders, layer structure and variants.
Provide a USD file as input to test its compliance with basic asset standards.
------------------------------------------------------------
"""


def display_help(stream=None) -> None:
    (stream or sys.stdout).write(HELP_TEXT)


def display_intro(stream=None) -> None:
    (stream or sys.stdout).write(INTRO_TEXT + "\n")


def _fail(message: Optional[str] = None) -> NoReturn:
    if message:
        sys.stderr.write(f"Error: {message}\n")
    display_help(sys.stderr)
    sys.exit(1)


class _ArgumentParser(argparse.ArgumentParser):
    """argparse with usdcheck's exit status for malformed arguments."""

    def error(self, message: str) -> NoReturn:
        _fail(message)


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(prog="usdcheck", add_help=False, allow_abbrev=False)
    ap.add_argument("scene_path")
    for check_id in CheckId:
        ap.add_argument(f"-only-{check_id.value}", action="store_true", dest=f"only_{check_id.value}")
    for check_id in CheckId:
        ap.add_argument(f"-skip-{check_id.value}", action="store_true", dest=f"skip_{check_id.value}")
    ap.add_argument("-output", dest="output", default="", metavar="path")
    ap.add_argument("-help", action="store_true", dest="help")
    return ap


def parse_arguments(argv: Optional[Sequence[str]] = None) -> Tuple[str, RunConfig]:
    """
    Parse command line arguments into the scene path and a RunConfig.
    Exits 0 after printing help for -help, and exits 1 on any invalid combination.
    """
    args: List[str] = list(sys.argv[1:] if argv is None else argv)

    # -help wins over everything else
    if "-help" in args:
        display_help()
        sys.exit(0)

    # First argument must be the USD file path
    if not args or args[0].startswith("-"):
        _fail()

    ns = build_parser().parse_args(args)

    only = [cid for cid in CheckId if getattr(ns, f"only_{cid.value}")]
    skip = [cid for cid in CheckId if getattr(ns, f"skip_{cid.value}")]

    if len(only) > 1:
        _fail("Only one '-only' flag can be used at a time.")

    try:
        config = RunConfig.from_flags(
            only=only[0] if only else None,
            skip=skip,
            output_path=ns.output or None,
        )
    except RunConfigError as ex:
        _fail(str(ex))

    return ns.scene_path, config


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = load_settings()
    configure_logging(settings.log_level)

    scene_path, config = parse_arguments(argv)
    logger.debug(f"Checks enabled: {[cid.value for cid in config.enabled_checks()]}")

    if settings.show_intro:
        display_intro()

    runner = CheckRunner(scene_path)
    runner.run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
