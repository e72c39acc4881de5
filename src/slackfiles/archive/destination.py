"""
Chooses the local directory an archived file is written to.

A file may be shared in several places. Candidates are collected in a fixed
order (direct messages, private groups, public channels) and the last one
wins, so a public channel beats a private group which beats a direct message.
Every resolved scope is still returned so the metadata document lists them all.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from slackfiles.archive.errors import PartnerError
from slackfiles.archive.resolver import IdentityResolver
from slackfiles.archive.schema import (
    FileRecord,
    UserIdentity,
    ChannelIdentity,
    display_name_for,
)
from slackfiles.utils.style.clean import normalize, fit
from slackfiles.utils.logs import report

logger = report.settings(__file__)

MAX_DIRNAME_LENGTH = 254
MAX_DIRNAME_BYTES = 255


@dataclass
class Resolution:
    """Outcome of destination resolution for one file."""
    destination: Optional[Path] = None
    channels: List[ChannelIdentity] = field(default_factory=list)
    groups: List[ChannelIdentity] = field(default_factory=list)
    ims: List[UserIdentity] = field(default_factory=list)

    def metadata(self) -> Dict[str, list]:
        """Scope sections of the metadata document."""
        return {
            "channels": [c.to_dict() for c in self.channels],
            "groups": [g.to_dict() for g in self.groups],
            "ims": [{"with": partner.to_dict()} for partner in self.ims],
        }


def dirname_for(text: str) -> str:
    return fit(normalize(text), MAX_DIRNAME_LENGTH, MAX_DIRNAME_BYTES)


def im_dirnames(first: UserIdentity, second: UserIdentity) -> Tuple[str, str]:
    """Canonical and reversed directory names for a direct message pair.

    The canonical name lists the participant with the lower user id first.
    """
    a, b = sorted((first, second), key=lambda u: u.id)

    def dirname(x: UserIdentity, y: UserIdentity) -> str:
        return dirname_for(f"im {display_name_for(x)} with {display_name_for(y)}")

    return dirname(a, b), dirname(b, a)


class DestinationResolver:
    """Maps a file's channels, groups and conversations to one directory."""

    def __init__(self, resolver: IdentityResolver, root: Path, include_ims: bool = False):
        self.resolver = resolver
        self.root = Path(root)
        self.include_ims = include_ims

    def resolve(self, record: FileRecord, owner: UserIdentity) -> Resolution:
        """Resolve every applicable scope of `record` and pick its directory."""
        resolution = Resolution()
        candidates: List[str] = []

        if self.include_ims:
            for im in record.ims:
                partner = self.partner(im, owner)
                resolution.ims.append(partner)
                candidates.append(self.im_directory(owner, partner))

        for group_id in record.groups:
            group = self.resolver.resolve_group(group_id)
            resolution.groups.append(group)
            candidates.append(fit(group.name or group.id, MAX_DIRNAME_LENGTH, MAX_DIRNAME_BYTES))

        for channel_id in record.channels:
            channel = self.resolver.resolve_channel(channel_id)
            resolution.channels.append(channel)
            candidates.append(fit(channel.name or channel.id, MAX_DIRNAME_LENGTH, MAX_DIRNAME_BYTES))

        if candidates:
            resolution.destination = self.root / candidates[-1]
            if len(candidates) > 1:
                logger.debug("File %s has %d scopes, using %s", record.id, len(candidates), candidates[-1])
        return resolution

    def partner(self, conversation_id: str, owner: UserIdentity) -> UserIdentity:
        """The direct message participant who is not the file owner."""
        conversation = self.resolver.resolve_conversation_members(conversation_id)
        for member in conversation.members:
            if member != owner.id:
                return self.resolver.resolve_user(member)
        raise PartnerError(
            f"cannot retrieve instant message counterpart user for conversation {conversation_id}"
        )

    def im_directory(self, owner: UserIdentity, partner: UserIdentity) -> str:
        """Directory name shared by both directions of a conversation.

        Archives written before names were ordered by user id may hold the
        pair under the reversed name; that directory is reused when it exists
        and the canonical one does not.
        """
        canonical, reverse = im_dirnames(owner, partner)
        if not (self.root / canonical).is_dir() and (self.root / reverse).is_dir():
            logger.debug("Reusing existing conversation directory %s", reverse)
            return reverse
        return canonical
