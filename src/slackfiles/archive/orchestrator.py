"""
Archival orchestrator: drives every enumerated file through name generation,
identity and destination resolution, and the three local/remote side effects.

Each side effect is guarded on its own. The artifact and the metadata document
are only written when their path does not exist yet, so a second pass over the
same files only fills in what an interrupted pass left out. A name already
holding the metadata of a different file is passed over for a numbered one.
Remote deletion has no such guard and is issued at most once per file per run.
"""

import sys
import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, TextIO

from slackfiles.archive.destination import DestinationResolver
from slackfiles.archive.errors import RemoteError
from slackfiles.archive.naming import create_filename, created_timestamp, METADATA_EXTENSION
from slackfiles.connectors.slack.client import PARTIAL_SUFFIX
from slackfiles.archive.resolver import IdentityResolver
from slackfiles.archive.schema import FileRecord, RunSummary, UserIdentity
from slackfiles.utils.style import ansi
from slackfiles.utils.logs import report

logger = report.settings(__file__)

NAME_WIDTH = 80
# Metadata fields that tell two files with the same generated name apart
IDENTITY_FIELDS = ("created", "timestamp", "name", "size")


class FileState(Enum):
    """Stages a file moves through while being archived."""
    START = "start"
    IDENTITY_RESOLVED = "identity_resolved"
    DESTINATION_RESOLVED = "destination_resolved"
    SKIPPED = "skipped"
    SKIPPED_PRIVATE = "skipped_private"
    PROCESSED = "processed"


class Progress:
    """Prints the per-file progress line unless running quietly."""

    def __init__(self, quiet: bool = False, stream: Optional[TextIO] = None):
        self.quiet = quiet
        self.stream = stream

    def write(self, text: str) -> None:
        if self.quiet:
            return
        stream = self.stream or sys.stdout
        stream.write(text)
        stream.flush()

    def start(self, counter: int, total: int, filename: str) -> None:
        self.write(f"[{counter:<4}/{total:<4}] {filename:<{NAME_WIDTH}}: ")

    def step(self, label: str, done: bool) -> None:
        self.write(f"{label} " if done else " " * (len(label) + 1))


def build_metadata(record: FileRecord, owner: UserIdentity) -> Dict[str, Any]:
    """Metadata document draft for a file; scope sections start empty."""
    return {
        "created": created_timestamp(record.created),
        "timestamp": record.timestamp,
        "name": record.name,
        "title": record.title,
        "mimetype": record.mimetype,
        "filetype": record.filetype,
        "pretty_type": record.pretty_type,
        "size": record.size,
        "image_exif_rotation": record.image_exif_rotation,
        "original_w": record.original_w,
        "original_h": record.original_h,
        "channels": [],
        "groups": [],
        "ims": [],
        "user": owner.to_dict(),
    }


class Archiver:
    """Archives enumerated files one at a time."""

    def __init__(self, client, resolver: IdentityResolver, destinations: DestinationResolver,
                 remove: bool = False, simulation: bool = False, progress: Optional[Progress] = None):
        self.client = client
        self.resolver = resolver
        self.destinations = destinations
        self.remove = remove
        self.simulation = simulation
        self.progress = progress or Progress()
        self.summary = RunSummary()
        self.state = FileState.START

    def run(self, records: Iterable[FileRecord], total: int) -> RunSummary:
        """Process every record in order and return the run's counters."""
        for counter, record in enumerate(records, start=1):
            self.process(record, counter, total)

        logger.info(
            "Run finished: %d processed, %d skipped, %d not downloadable, "
            "%d downloaded, %d metadata written, %d deleted, %d identity lookups",
            self.summary.processed, self.summary.skipped, self.summary.skipped_private,
            self.summary.downloaded, self.summary.metadata_written, self.summary.deleted,
            self.resolver.calls,
        )
        return self.summary

    def process(self, record: FileRecord, counter: int = 1, total: int = 1) -> FileState:
        """Archive a single file and return the state it ended in."""
        self.state = FileState.START
        logger.debug("File %s: %s", record.id, self.state.value)
        filename = create_filename(record)
        self.progress.start(counter, total, filename)

        if not record.url_private_download:
            logger.info("Skipping %s (%s): no private download url", record.id, filename)
            self.progress.write(f"        : {ansi.grey}Skipped non-downloadable file!{ansi.reset}\n")
            self.summary.skipped_private += 1
            return self._enter(record, FileState.SKIPPED_PRIVATE)

        owner = self.resolver.resolve_user(record.user)
        metadata = build_metadata(record, owner)
        self._enter(record, FileState.IDENTITY_RESOLVED)

        resolution = self.destinations.resolve(record, owner)
        metadata.update(resolution.metadata())
        if resolution.destination is None:
            logger.info("Skipping %s (%s): no applicable channel, group or conversation", record.id, filename)
            self.progress.write(f"        : {ansi.grey}Skipped private file!{ansi.reset}\n")
            self.summary.skipped += 1
            return self._enter(record, FileState.SKIPPED)
        self._enter(record, FileState.DESTINATION_RESOLVED)

        target = resolution.destination
        filename = self._claim_name(record, metadata, target, filename)
        artifact = target / f"{filename}.{record.filetype}"
        metadata_file = target / f"{filename}{METADATA_EXTENSION}"

        if not self.simulation:
            target.mkdir(parents=True, exist_ok=True)

        downloaded = self._download(record, artifact)
        self.progress.step("DL", downloaded)

        written = self._write_metadata(metadata, metadata_file)
        self.progress.step("MD", written)

        deleted = self._delete(record)
        self.progress.step("R", deleted)

        self.progress.write(f": {ansi.green}Done!{ansi.reset}\n")
        self.summary.processed += 1
        return self._enter(record, FileState.PROCESSED)

    def _claim_name(self, record: FileRecord, metadata: Dict[str, Any], target: Path, filename: str) -> str:
        """First generated name in `target` that is free or already holds this file.

        Different files sharing a title and creation second get ` 2`, ` 3`, ...
        """
        counter = 1
        while not self._owns(record, metadata, target, filename):
            counter += 1
            filename = create_filename(record, counter)
        if counter > 1:
            logger.info("Name taken by another file, archiving %s as %s", record.id, filename)
        return filename

    @staticmethod
    def _owns(record: FileRecord, metadata: Dict[str, Any], target: Path, filename: str) -> bool:
        metadata_file = target / f"{filename}{METADATA_EXTENSION}"
        if not metadata_file.exists():
            # a bare artifact is what an interrupted pass leaves behind
            return True
        try:
            existing = json.loads(metadata_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable metadata %s for %s: %s", metadata_file, record.id, exc)
            return False
        if not isinstance(existing, dict):
            return False
        return all(existing.get(key) == metadata[key] for key in IDENTITY_FIELDS)

    def _enter(self, record: FileRecord, state: FileState) -> FileState:
        logger.debug("File %s: %s -> %s", record.id, self.state.value, state.value)
        self.state = state
        return state

    # ------------------------------------------------------------------ #
    #  Side effects                                                      #
    # ------------------------------------------------------------------ #
    def _download(self, record: FileRecord, artifact: Path) -> bool:
        if self.simulation or artifact.exists():
            return False
        logger.info("Downloading %s to %s", record.id, artifact)
        self.client.download(record.url_private_download, artifact)
        self.summary.downloaded += 1
        return True

    def _write_metadata(self, metadata: Dict[str, Any], metadata_file: Path) -> bool:
        if self.simulation or metadata_file.exists():
            return False
        partial = metadata_file.with_name(metadata_file.name + PARTIAL_SUFFIX)
        partial.write_text(json.dumps(metadata, indent=4, ensure_ascii=False), encoding="utf-8")
        partial.replace(metadata_file)
        self.summary.metadata_written += 1
        return True

    def _delete(self, record: FileRecord) -> bool:
        if self.simulation or not self.remove:
            return False
        logger.info("Deleting %s from Slack", record.id)
        response = self.client.files_delete(record.id)
        if not response.get("ok"):
            raise RemoteError(f"could not delete file {record.id} ({response.get('error', 'unknown error')})")
        self.summary.deleted += 1
        return True
