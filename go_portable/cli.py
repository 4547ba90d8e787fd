from __future__ import annotations

import argparse
import dataclasses
import logging
from typing import BinaryIO, List, Mapping, Optional

from go_portable.app_factory import create_app
from go_portable.config.ini_config import AppSettings, IniConfig
from go_portable.domain.errors import PortabilityError
from go_portable.domain.models import Mode, NoBuildableFilesPolicy
from go_portable.presentation.report_writer import ReportWriter

PROG = "go-portable"

logger = logging.getLogger(__name__)


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {raw!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Check that packages build or pass go vet on every supported "
            "platform, as reported by `go tool dist list`."
        ),
        epilog="Environment: GOCMD selects the go command, GO_PORTABLE_INI an optional settings file.",
    )
    parser.add_argument(
        "-first-class", "--first-class",
        dest="first_class",
        action="store_true",
        help="use only first class ports",
    )
    parser.add_argument(
        "-mode", "--mode",
        choices=[m.value for m in Mode],
        default=Mode.ANALYZE.value,
        help="verification mode: analyze runs go vet, compile runs go build (default: %(default)s)",
    )
    parser.add_argument(
        "-j", "-jobs", "--jobs",
        dest="jobs",
        type=_positive_int,
        default=None,
        help="number of platforms verified in parallel (default: from settings, else 1)",
    )
    parser.add_argument(
        "-skip-excluded", "--skip-excluded",
        dest="skip_excluded",
        action="store_true",
        help="do not report platforms where build constraints exclude all files",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="log progress (-v) or every command run (-vv)",
    )
    parser.add_argument("packages", nargs="*", help="package patterns, passed to go as-is")
    return parser


def configure_logging(level: str) -> None:
    if level == "DEBUG":
        fmt = "%(name)s: %(levelname)s: %(message)s"
    else:
        fmt = f"{PROG}: %(message)s"
    logging.basicConfig(level=level, format=fmt, force=True)


def _log_level(verbose: int, settings: Optional[AppSettings]) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return settings.log_level if settings else "WARNING"


def apply_overrides(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    changes = {}
    if args.jobs is not None:
        changes["jobs"] = args.jobs
    if args.skip_excluded:
        changes["no_buildable_files"] = NoBuildableFilesPolicy.IGNORE
    return dataclasses.replace(settings, **changes) if changes else settings


def main(
    argv: Optional[List[str]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[BinaryIO] = None,
) -> int:
    # An invalid -mode exits here with status 2, before any platform is listed.
    args = build_parser().parse_args(argv)

    try:
        settings = IniConfig.from_env_or_default(environ).load_settings()
    except PortabilityError as e:
        configure_logging(_log_level(args.verbose, None))
        logger.error("%s", e)
        return e.exit_status

    settings = apply_overrides(settings, args)
    configure_logging(_log_level(args.verbose, settings))
    logger.debug("settings: %r", settings)

    app = create_app(settings)
    writer = ReportWriter(settings.tool.name, stream)

    try:
        report = app.run(
            Mode(args.mode),
            args.packages,
            first_class=args.first_class,
            on_diagnostic=writer.write_entry,
        )
    except PortabilityError as e:
        logger.error("%s", e)
        return e.exit_status

    return report.exit_status
