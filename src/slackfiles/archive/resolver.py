"""
Memoized lookups of users, channels, private groups and conversation members.

Archiving touches the same handful of people and channels over and over, so
each id is fetched from Slack at most once per resolver and kept for the rest
of the run. The cache lives on the resolver instance only.
"""

from typing import Any, Callable, Dict, Union

from slackfiles.archive.errors import InvalidArgument, ResolutionError
from slackfiles.archive.schema import (
    IdentityKind,
    UserIdentity,
    ChannelIdentity,
    ConversationMembers,
)
from slackfiles.utils.logs import report

logger = report.settings(__file__)


class IdentityResolver:
    """Resolves Slack ids to identities through a run-scoped cache."""

    def __init__(self, client):
        self.client = client
        self.calls = 0
        self._cache: Dict[IdentityKind, Dict[str, Any]] = {kind: {} for kind in IdentityKind}
        self._fetchers: Dict[IdentityKind, Callable[[str], Any]] = {
            IdentityKind.USER: self._fetch_user,
            IdentityKind.CHANNEL: lambda cid: self._fetch_channel(IdentityKind.CHANNEL, cid),
            IdentityKind.GROUP: lambda cid: self._fetch_channel(IdentityKind.GROUP, cid),
            IdentityKind.CONVERSATION: self._fetch_members,
        }

    def resolve(self, kind: Union[IdentityKind, str], identifier: str) -> Any:
        """Return the identity for `identifier`, asking Slack only on a cache miss."""
        try:
            kind = IdentityKind(kind)
        except ValueError as exc:
            raise InvalidArgument(f"invalid identity kind: {kind!r}") from exc

        cache = self._cache[kind]
        if identifier not in cache:
            logger.debug("Cache miss for %s %s", kind.value, identifier)
            self.calls += 1
            cache[identifier] = self._fetchers[kind](identifier)
        return cache[identifier]

    def resolve_user(self, user_id: str) -> UserIdentity:
        return self.resolve(IdentityKind.USER, user_id)

    def resolve_channel(self, channel_id: str) -> ChannelIdentity:
        return self.resolve(IdentityKind.CHANNEL, channel_id)

    def resolve_group(self, group_id: str) -> ChannelIdentity:
        return self.resolve(IdentityKind.GROUP, group_id)

    def resolve_conversation_members(self, conversation_id: str) -> ConversationMembers:
        return self.resolve(IdentityKind.CONVERSATION, conversation_id)

    # ------------------------------------------------------------------ #
    #  Remote lookups                                                    #
    # ------------------------------------------------------------------ #
    def _fetch_user(self, user_id: str) -> UserIdentity:
        response = self.client.users_info(user_id)
        self._check(response, "user", user_id)
        return UserIdentity.from_api(user_id, response.get("user") or {})

    def _fetch_channel(self, kind: IdentityKind, channel_id: str) -> ChannelIdentity:
        response = self.client.conversations_info(channel_id)
        self._check(response, kind.value, channel_id)
        return ChannelIdentity.from_api(kind, channel_id, response.get("channel") or {})

    def _fetch_members(self, conversation_id: str) -> ConversationMembers:
        response = self.client.conversations_members(conversation_id)
        self._check(response, "conversation", conversation_id)
        return ConversationMembers(conversation_id, tuple(response.get("members") or ()))

    @staticmethod
    def _check(response: Dict[str, Any], label: str, identifier: str) -> None:
        if not response.get("ok"):
            logger.error("Could not resolve %s %s: %s", label, identifier, response.get("error"))
            raise ResolutionError(
                f"could not resolve {label} {identifier} ({response.get('error', 'unknown error')})"
            )
