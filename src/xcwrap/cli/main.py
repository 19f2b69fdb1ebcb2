"""
Command-line interface for the xcwrap build wrapper.

This module parses the command line into a RunRequest, loads configuration
defaults, and hands the request to a BuildRunner. The process exit status is
the one chosen by the run:

    0   success
    1   invalid arguments or setup error
    N   the build tool's own exit status on failure
    124 timeout
    130 interrupted (SIGINT)
    143 terminated (SIGTERM)

Usage:
    xcwrap --project PATH --scheme NAME [--action build|test|archive|clean]
           [--device NAME] [--timeout SECONDS] [--archive-path PATH]
           [--log PATH] [--quiet] [--config PATH] [--verbose]

Example:
    xcwrap --project ~/src/Yumami --scheme Yumami --device "iPhone 16 Pro"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..models.config import WrapperConfig
from ..models.outcome import ExitCodes
from ..models.request import Operation, RunRequest
from ..orchestration import BuildRunner
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"


class WrapperArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(ExitCodes.SETUP_ERROR, f"{self.prog}: error: {message}\n")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser(config: WrapperConfig) -> WrapperArgumentParser:
    parser = WrapperArgumentParser(
        prog="xcwrap",
        description="Run xcodebuild under a hard timeout, log its output and summarise the result.",
    )
    parser.add_argument(
        "-p", "--project",
        required=True,
        help="Directory containing the .xcworkspace or .xcodeproj.",
    )
    parser.add_argument(
        "-s", "--scheme",
        required=True,
        help="Scheme to build.",
    )
    parser.add_argument(
        "-a", "--action",
        default=Operation.BUILD.value,
        help=f"Operation to run, one of {Operation.names()}. Defaults to build.",
    )
    parser.add_argument(
        "-d", "--device",
        default=config.default_device,
        help=f"Simulator name for build/test. Defaults to '{config.default_device}'.",
    )
    parser.add_argument(
        "-t", "--timeout",
        help=(
            f"Timeout in seconds. Defaults to {config.timeout_seconds}, "
            f"or {config.test_timeout_seconds} for test."
        ),
    )
    parser.add_argument(
        "--archive-path",
        help="Output .xcarchive path, required for archive. Relative paths are taken from --project.",
    )
    parser.add_argument(
        "-l", "--log",
        help=f"Log file for the build output. Defaults to {config.log_file}.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only print the final summary and errors.",
    )
    parser.add_argument(
        "--config",
        help="Path to a config.toml with wrapper defaults.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    return parser


def build_request(args: argparse.Namespace, config: WrapperConfig) -> RunRequest:
    """
    Turn parsed arguments into a RunRequest.

    Raises:
        ValidationError: If any option value is invalid
    """
    operation = Operation(validate_enum_choice(
        args.action, choices=Operation.names(), field_name="--action"
    ))
    project = validate_non_empty_string(args.project, field_name="--project")
    scheme = validate_non_empty_string(args.scheme, field_name="--scheme")

    archive_path = None
    if operation is Operation.ARCHIVE:
        archive_path = Path(validate_non_empty_string(
            args.archive_path, field_name="--archive-path"
        ))

    if args.timeout is None:
        timeout = config.test_timeout_seconds if operation is Operation.TEST else config.timeout_seconds
    else:
        timeout = validate_positive_integer(args.timeout, min_value=1, field_name="--timeout")

    device = None
    if operation.uses_destination:
        device = validate_non_empty_string(args.device, field_name="--device")

    log_file = Path(args.log).expanduser() if args.log else config.log_file

    return RunRequest(
        target_dir=Path(project).expanduser(),
        scheme=scheme,
        operation=operation,
        timeout_seconds=timeout,
        log_file=log_file,
        device=device,
        archive_path=archive_path,
        quiet=args.quiet,
    )


def _preparse_config_option(argv: List[str]) -> argparse.Namespace:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config")
    pre_parser.add_argument("-v", "--verbose", action="store_true")
    known, _ = pre_parser.parse_known_args(argv)
    return known


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: Always, carrying the wrapper's exit status.
    """
    argv = list(sys.argv[1:] if argv is None else argv)

    early = _preparse_config_option(argv)
    setup_logging(early.verbose)

    try:
        if early.config:
            set_config_path(Path(early.config).expanduser())
        config = get_config()
    except Exception as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=ExitCodes.SETUP_ERROR,
            logger=logger,
        )

    parser = build_parser(config)
    args = parser.parse_args(argv)

    try:
        request = build_request(args, config)
    except ValidationError as e:
        parser.error(str(e))

    logger.debug(f"Resolved request: {request}")

    try:
        exit_code = BuildRunner(request, config).run()
    except KeyboardInterrupt:
        # Interrupted before the supervised run installed its own handlers.
        sys.stderr.write("\nCancelled\n")
        exit_code = ExitCodes.INTERRUPT

    sys.exit(exit_code)


if __name__ == "__main__":
    main_cli()
