"""
Typed records flowing through the archive pipeline.

Slack answers with loosely shaped JSON; everything the pipeline relies on is
lifted into the frozen dataclasses below right at the edge, so later stages
work with named fields only.
"""

from enum import Enum
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional, Tuple


class IdentityKind(Enum):
    """Kinds of ids the identity resolver knows how to look up."""
    USER = "user"
    CHANNEL = "channel"
    GROUP = "group"
    CONVERSATION = "conversation"


@dataclass(frozen=True)
class FileRecord:
    """Snapshot of one entry of the workspace file index."""
    id: str
    title: str = ""
    name: str = ""
    filetype: str = ""
    mimetype: str = ""
    created: int = 0
    size: int = 0
    user: str = ""
    url_private_download: Optional[str] = None
    channels: Tuple[str, ...] = ()
    groups: Tuple[str, ...] = ()
    ims: Tuple[str, ...] = ()
    timestamp: Optional[int] = None
    pretty_type: str = ""
    image_exif_rotation: Optional[int] = None
    original_w: Optional[int] = None
    original_h: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'FileRecord':
        """Build a record from a `files.list` entry."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            name=data.get("name") or "",
            filetype=data.get("filetype") or "",
            mimetype=data.get("mimetype") or "",
            created=int(data.get("created") or 0),
            size=int(data.get("size") or 0),
            user=data.get("user") or "",
            url_private_download=data.get("url_private_download") or None,
            channels=tuple(data.get("channels") or ()),
            groups=tuple(data.get("groups") or ()),
            ims=tuple(data.get("ims") or ()),
            timestamp=data.get("timestamp"),
            pretty_type=data.get("pretty_type") or "",
            image_exif_rotation=data.get("image_exif_rotation"),
            original_w=data.get("original_w"),
            original_h=data.get("original_h"),
        )


@dataclass(frozen=True)
class UserIdentity:
    """Descriptive fields of a Slack user."""
    id: str
    name: str = ""
    realname: str = ""
    title: str = ""
    real_name: str = ""
    real_name_normalized: str = ""
    display_name: str = ""
    display_name_normalized: str = ""

    @classmethod
    def from_api(cls, user_id: str, data: Dict[str, Any]) -> 'UserIdentity':
        """Build an identity from a `users.info` user object."""
        profile = data.get("profile") or {}
        return cls(
            id=data.get("id") or user_id,
            name=data.get("name") or "",
            realname=data.get("real_name") or "",
            title=profile.get("title") or "",
            real_name=profile.get("real_name") or "",
            real_name_normalized=profile.get("real_name_normalized") or "",
            display_name=profile.get("display_name") or "",
            display_name_normalized=profile.get("display_name_normalized") or "",
        )

    def to_dict(self) -> Dict[str, str]:
        """Fields as written to the metadata document."""
        data = asdict(self)
        data.pop("id")
        return data


def display_name_for(user: UserIdentity) -> str:
    """Best available human readable name for a user."""
    for candidate in (
        user.real_name_normalized,
        user.realname,
        user.real_name,
        user.display_name,
    ):
        if candidate:
            return candidate
    return user.name


@dataclass(frozen=True)
class ChannelIdentity:
    """Name and purpose of a public channel or private group."""
    kind: IdentityKind
    id: str
    name: str = ""
    name_normalized: str = ""
    purpose: str = ""

    @classmethod
    def from_api(cls, kind: IdentityKind, channel_id: str, data: Dict[str, Any]) -> 'ChannelIdentity':
        """Build an identity from a `conversations.info` channel object."""
        purpose = data.get("purpose") or {}
        return cls(
            kind=kind,
            id=data.get("id") or channel_id,
            name=data.get("name") or "",
            name_normalized=data.get("name_normalized") or "",
            purpose=(purpose.get("value") or "") if isinstance(purpose, dict) else str(purpose),
        )

    def to_dict(self) -> Dict[str, str]:
        """Fields as written to the metadata document."""
        return {
            "id": self.id,
            "name": self.name,
            "name_normalized": self.name_normalized,
            "purpose": self.purpose,
        }


@dataclass(frozen=True)
class ConversationMembers:
    """Participants of a direct message conversation."""
    id: str
    members: Tuple[str, ...] = ()


@dataclass
class RunSummary:
    """Counters collected over one archive run."""
    processed: int = 0
    skipped: int = 0
    skipped_private: int = 0
    downloaded: int = 0
    metadata_written: int = 0
    deleted: int = 0
