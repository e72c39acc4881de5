"""Local file names for archived Slack files."""
from datetime import datetime

from slackfiles.archive.schema import FileRecord
from slackfiles.connectors.slack.client import PARTIAL_SUFFIX
from slackfiles.utils.style.clean import normalize, fit

# 255 minus room for a short extension
MAX_NAME_LENGTH = 253
# Most filesystems limit a single path component to 255 bytes
MAX_NAME_BYTES = 255
METADATA_EXTENSION = ".json"
FALLBACK_NAME = "unnamed"


def created_prefix(created: int) -> str:
    """Creation time as used at the front of every archived file name."""
    return datetime.fromtimestamp(created).strftime("%Y-%m-%d %H-%M-%S")


def name_budget(filetype: str) -> int:
    """Bytes left for the base name once every sibling extension is added.

    Covers `<name>.<filetype>`, its in-flight `.part` download and `<name>.json`.
    """
    suffixes = (f".{filetype}{PARTIAL_SUFFIX}", f"{METADATA_EXTENSION}{PARTIAL_SUFFIX}")
    return MAX_NAME_BYTES - max(len(s.encode("utf-8")) for s in suffixes)


def create_filename(record: FileRecord, counter: int = 1) -> str:
    """
    Build the extension-less base name for a file: the creation time followed
    by the normalized title, falling back to the normalized original name and
    finally to `unnamed` when normalization leaves nothing behind.

    A `counter` above 1 is appended as ` <counter>` to tell apart different
    files that would otherwise share a name; it survives truncation.
    """
    name = normalize(record.title, record.filetype) if record.title else ""
    if not name and record.name:
        name = normalize(record.name, record.filetype)
    if not name:
        name = FALLBACK_NAME

    suffix = f" {counter}" if counter > 1 else ""
    base = fit(
        f"{created_prefix(record.created)} {name}",
        MAX_NAME_LENGTH - len(suffix),
        name_budget(record.filetype) - len(suffix.encode("utf-8")),
    )
    return base + suffix


def created_timestamp(created: int) -> str:
    """Creation time as recorded in the metadata document."""
    return datetime.fromtimestamp(created).strftime("%Y-%m-%d %H:%M:%S")
