#!/usr/bin/env python3
"""
Download, organize and optionally remove old files from a Slack workspace.

Files older than the retention window are saved into one directory per
channel, private group or direct message conversation, each next to a JSON
document describing it. With `-r` the Slack copy is deleted afterwards.
"""

import sys
import time
import argparse
import configparser
from pathlib import Path
from typing import List, Optional, TextIO

from slackfiles.archive.destination import DestinationResolver
from slackfiles.archive.enumerator import FileEnumerator
from slackfiles.archive.errors import ArchiveError, ConfigurationError
from slackfiles.archive.orchestrator import Archiver, Progress
from slackfiles.archive.resolver import IdentityResolver
from slackfiles.archive.schema import RunSummary
from slackfiles.connectors.slack.client import SlackClient, SlackApiError
from slackfiles.utils.cfg import engine
from slackfiles.utils.cfg.schema import Config
from slackfiles.utils.style import ansi
from slackfiles.utils.logs import report

logger = report.settings(__file__)

WEEK = 7 * 24 * 60 * 60

USAGE = """slack-archive -t [token] [options]

  -c [path]     Read settings from an INI file, created with defaults if missing.

  -d [path]     Download destination. Defaults to ./downloads.

  -h            Show this help.

  -i            Include files belonging to private instant messages between users.

  -r            Remove files from Slack.

  -s            Simulation mode, do not actually download and remove files from Slack.

  -t [token]    Slack team token.

  -w [number]   Number of weeks to retain. Defaults to 26 (e.g. half a year), 0 archives everything.

  -q            Quiet mode. Suppresses all output except errors.
"""


def build_parser() -> argparse.ArgumentParser:
    """Command line flags; every one of them overrides the config file."""
    parser = argparse.ArgumentParser(prog="slack-archive", add_help=False)
    parser.add_argument("-c", dest="config", type=Path, help="INI config file")
    parser.add_argument("-d", dest="destination", type=Path, help="Download destination")
    parser.add_argument("-h", dest="help", action="store_true", help="Show this help")
    parser.add_argument("-i", dest="include_ims", action="store_true", help="Include direct messages")
    parser.add_argument("-r", dest="remove", action="store_true", help="Remove files from Slack")
    parser.add_argument("-s", dest="simulation", action="store_true", help="Simulation mode")
    parser.add_argument("-t", dest="token", help="Slack token")
    parser.add_argument("-w", dest="weeks", type=int, help="Weeks to retain")
    parser.add_argument("-q", dest="quiet", action="store_true", help="Quiet mode")
    return parser


def configure(args: argparse.Namespace) -> Config:
    """Merge config file values and command line flags."""
    try:
        cfg = engine.load(args.config)
    except (ValueError, OSError, configparser.Error) as exc:
        raise ConfigurationError(f"invalid config file {args.config}: {exc}") from exc

    if args.token:
        cfg.api.token = args.token
    if args.destination is not None:
        cfg.archive.destination = args.destination
    if args.weeks is not None:
        cfg.archive.weeks = args.weeks
    for flag in ("include_ims", "remove", "simulation", "quiet"):
        if getattr(args, flag):
            setattr(cfg.archive, flag, True)

    if not cfg.api.token:
        raise ConfigurationError("providing a token is required.")
    if cfg.archive.weeks < 0:
        raise ConfigurationError("the number of weeks cannot be negative.")
    if cfg.api.page_size < 1:
        raise ConfigurationError("page_size must be at least 1.")
    return cfg


def cutoff_for(weeks: int, now: Optional[float] = None) -> Optional[float]:
    """Unix timestamp files must be older than, or None to take everything."""
    if weeks == 0:
        return None
    return (now if now is not None else time.time()) - weeks * WEEK


def intro(cfg: Config) -> str:
    """The line printed before any work starts."""
    action = "Archiving" if cfg.archive.remove else "Downloading"
    weeks = cfg.archive.weeks
    if weeks == 0:
        age = ""
    else:
        age = f" older than {weeks} week" if weeks == 1 else f" older than {weeks} weeks"
    return f"{action} files{age} to '{cfg.archive.destination}'."


def run_archive(cfg: Config, client=None, stream: Optional[TextIO] = None) -> RunSummary:
    """Wire the pipeline together and archive everything past the cutoff."""
    client = client or SlackClient(cfg.api.token, cfg.api.base_url, cfg.api.timeout)
    progress = Progress(quiet=cfg.archive.quiet, stream=stream)

    progress.write(intro(cfg) + "\n")
    if cfg.archive.simulation:
        progress.write(f"{ansi.yellow}Running in simulation mode, not actually performing the actions!{ansi.reset}\n")
    logger.info("%s (simulation=%s, include_ims=%s)", intro(cfg), cfg.archive.simulation, cfg.archive.include_ims)

    enumerator = FileEnumerator(
        client,
        page_size=cfg.api.page_size,
        types=cfg.api.types,
        on_total=lambda total: progress.write(f"Found {total} files\n"),
    )
    records = enumerator.list_files_older_than(cutoff_for(cfg.archive.weeks))

    resolver = IdentityResolver(client)
    destinations = DestinationResolver(resolver, cfg.archive.destination, cfg.archive.include_ims)
    archiver = Archiver(
        client,
        resolver,
        destinations,
        remove=cfg.archive.remove,
        simulation=cfg.archive.simulation,
        progress=progress,
    )
    return archiver.run(records, enumerator.total)


def main(argv: Optional[List[str]] = None, client=None) -> int:
    """Entry point; returns the process exit status."""
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_args(argv)

    if not argv or args.help:
        print(USAGE)
        return 0

    try:
        cfg = configure(args)
        run_archive(cfg, client=client)
    except (ArchiveError, SlackApiError, OSError) as exc:
        logger.error("Aborting: %s", exc)
        print(f"{ansi.red}Error:{ansi.reset} {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted by user", file=sys.stderr)
        return 130
    return 0


def run_main():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run_main()
