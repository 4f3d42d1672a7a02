"""
SysObs CLI - Command line interface for running log checks.

Provides commands for:
- Running a check pass (default)
- Displaying help and version

Every configuration setting can be overridden with ``--<setting>=<value>``.
The notifier is selected with ``--notifier_type`` and configured with
repeated ``--notifier_config KEY=VALUE`` options. Unknown options are
ignored with a warning.
"""

import argparse
import sys
from typing import Any

import yaml

from sysobs import __version__
from sysobs.check import CheckError, CheckRunner
from sysobs.config import DEFAULT_CONFIG_FILE, resolve_settings
from sysobs.logging_config import DEFAULT_VERBOSITY, get_logger, setup_logging
from sysobs.registry import create_notifier

logger = get_logger(__name__)

SETTING_HELP: dict[str, str] = {
    "environment": "the environment identifier (default: 'default')",
    "log_folder": "the folder in which all log files are located (default: '.')",
    "log_file": "the log file to analyze, relative to the log folder",
    "log_file_pattern": "the pattern of the log files, '%%date' is replaced by the log date",
    "log_file_date_format": "the date format of the log file names (default: '%%Y-%%m-%%d')",
    "log_file_date_delay": "delay in days for the current log file date (default: '-1')",
    "log_file_history_limit": "the maximum number of files used for history (default: '10')",
    "log_file_history_offset": "the number of most recent files ignored for history (default: '0')",
    "log_types": "the log types, ordered by decreasing importance (default: 'ERROR WARNING INFO DEBUG')",
    "log_type_pattern": "the pattern matching a log type in a line, '%%type' is replaced "
                        "by the log type and '%%environment' by the environment (default: '%%type')",
    "log_thresholds_max": "the accepted number of occurrences per log type (default: '1 5 -1 -1')",
    "log_thresholds_var": "the accepted variation to average per log type, in %% "
                          "(default: '5 10 -1 -1')",
    "log_notification_level": "the least severe log type that triggers a notification "
                              "(default: 'WARNING')",
    "notification_subject": "the notification subject, '%%environment' and '%%level' are replaced",
    "disk_volume": "the volume for which disk usage is reported (default: '/')",
}


def notifier_option(text: str) -> tuple[str, Any]:
    """Parse a ``KEY=VALUE`` notifier option, the value is read as YAML."""
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    try:
        return key, yaml.safe_load(value)
    except yaml.YAMLError as e:
        raise argparse.ArgumentTypeError(f"invalid value for '{key}': {e}") from e


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sysobs",
        description="SysObs - Log file analysis and alerting"
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="check",
        choices=["check", "help", "version"],
        help="check (default) runs the log analysis, help and version display information"
    )
    parser.add_argument(
        "-v", "--version",
        dest="show_version",
        action="store_true",
        help="Display the version and exit"
    )
    parser.add_argument(
        "-c", "--config", "--config_file",
        dest="config",
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_FILE} if present)"
    )
    parser.add_argument(
        "--verbosity",
        type=int,
        choices=range(5),
        default=None,
        help="the verbosity for logs (0=TRACE, 1=DEBUG, 2=INFO, 3=WARNING, 4=ERROR) - default: 2"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the notification instead of sending it"
    )

    options = parser.add_argument_group("check options")
    for name, help_text in SETTING_HELP.items():
        options.add_argument(f"--{name}", metavar="VALUE", default=None, help=help_text)

    notifier = parser.add_argument_group("notifier options")
    notifier.add_argument(
        "--notifier_type",
        metavar="TYPE",
        default=None,
        help="the notifier used to send reports (console, email, webhook, pushover)"
    )
    notifier.add_argument(
        "--notifier_config",
        metavar="KEY=VALUE",
        type=notifier_option,
        action="append",
        default=None,
        help="a notifier configuration value, may be repeated (e.g. --notifier_config url=https://...)"
    )
    return parser


def cmd_check(args: argparse.Namespace) -> int:
    """Run a check pass."""
    overrides = {name: getattr(args, name) for name in SETTING_HELP}
    overrides["verbosity"] = args.verbosity
    notifier_overrides: dict[str, Any] = {}
    if args.notifier_type is not None:
        notifier_overrides["type"] = args.notifier_type
    if args.notifier_config:
        notifier_overrides["config"] = dict(args.notifier_config)
    if args.dry_run:
        notifier_overrides = {"type": "console"}
    if notifier_overrides:
        overrides["notifier"] = notifier_overrides

    try:
        settings = resolve_settings(overrides, args.config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error("%s", e)
        return 1

    setup_logging(settings.verbosity)
    logger.debug("SysObs version %s", __version__)

    try:
        notifier = create_notifier(settings.notifier.type, dict(settings.notifier.config))
    except (KeyError, ValueError) as e:
        logger.error("Invalid notifier configuration: %s", e)
        return 1

    try:
        CheckRunner(settings, notifier).run()
    except CheckError as e:
        logger.error("%s", e)
        return 1
    except Exception:
        logger.exception("Error during check")
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)

    setup_logging(args.verbosity if args.verbosity is not None else DEFAULT_VERBOSITY)
    if unknown:
        logger.warning("Ignoring unknown option(s): %s", " ".join(unknown))

    if args.command == "help":
        parser.print_help()
        return 0

    if args.show_version or args.command == "version":
        print(__version__)
        return 0

    return cmd_check(args)


if __name__ == '__main__':
    sys.exit(main())
