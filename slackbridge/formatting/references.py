"""
Reference Resolver

Replaces Slack channel (<#C123|name>) and user (<@U123|nick>) references
with their Matrix counterparts.

Matches are collected against the original text before any lookup runs, then
the output is rebuilt in one pass. Replacements of a different length than
the token therefore never shift the offsets of later tokens.
"""

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from slackbridge.services.ports import ChannelNameLookup, IdentityDirectory, RoomDirectory
from slackbridge.utils.helpers import call_with_fallback

logger = logging.getLogger(__name__)

# In emotes the format is <#ID|name> / <@ID|nick>, in normal messages just <#ID> / <@ID>
CHANNEL_REF_PATTERN = re.compile(r"<#(\w+)(?:\|[^>]*)?>")
USER_REF_PATTERN = re.compile(r"<@(\w+)(?:\|[^>]*)?>")

MATRIX_TO_URL = "https://matrix.to/#/"

# Characters that would end the <url|label> wrapper early
LINK_LABEL_DELIMITERS = re.compile(r"[<>|]")


@dataclass(frozen=True)
class ReferenceSpan:
    """A reference token found in the original text."""

    start: int
    end: int
    ref_id: str


def find_references(text: str, pattern: re.Pattern) -> List[ReferenceSpan]:
    return [
        ReferenceSpan(start=match.start(), end=match.end(), ref_id=match.group(1))
        for match in pattern.finditer(text)
    ]


async def substitute_references(
    text: str,
    pattern: re.Pattern,
    resolve: Callable[[str], Awaitable[str]],
) -> str:
    """
    Replace every token matching ``pattern`` with ``await resolve(id)``.

    Tokens are resolved one at a time in document order.

    Args:
        text: Text to scan
        pattern: Regex whose first group is the referenced id
        resolve: Async callable producing the replacement for an id

    Returns:
        Text with all tokens replaced
    """
    spans = find_references(text, pattern)
    if not spans:
        return text

    replacements = []
    for span in spans:
        replacements.append(await resolve(span.ref_id))

    parts = []
    cursor = 0
    for span, replacement in zip(spans, replacements):
        parts.append(text[cursor:span.start])
        parts.append(replacement)
        cursor = span.end
    parts.append(text[cursor:])
    return "".join(parts)


def make_user_link(user_id: str, display_name: str) -> str:
    """
    Slack-style link to a Matrix user, turned into a pill when formatted.

    Delimiters are dropped from the display name so the label cannot close
    the link early.
    """
    label = LINK_LABEL_DELIMITERS.sub("", display_name).strip() or user_id
    return f"<{MATRIX_TO_URL}{user_id}|{label}>"


class ReferenceResolver:
    """
    Resolves channel and user references through the directories.

    Every lookup is bounded by ``timeout``; a failed or timed out lookup takes
    the same path as a lookup that found nothing.
    """

    def __init__(
        self,
        rooms: RoomDirectory,
        identities: IdentityDirectory,
        channel_names: ChannelNameLookup,
        timeout: Optional[float] = None,
    ):
        self.rooms = rooms
        self.identities = identities
        self.channel_names = channel_names
        self.timeout = timeout

    async def resolve_channel_refs(self, text: str) -> str:
        return await substitute_references(text, CHANNEL_REF_PATTERN, self._resolve_channel)

    async def resolve_user_refs(self, text: str, team_domain: str, channel_id: str) -> str:
        async def resolve(slack_user_id: str) -> str:
            return await self._resolve_user(slack_user_id, team_domain, channel_id)

        return await substitute_references(text, USER_REF_PATTERN, resolve)

    async def _resolve_channel(self, channel_id: str) -> str:
        room = await call_with_fallback(
            self.rooms.lookup_bridged_room(channel_id),
            None,
            self.timeout,
            f"bridged room lookup for {channel_id}",
        )

        # Bridged rooms are referred to by their canonical alias
        if room is not None:
            alias = await call_with_fallback(
                self.rooms.get_canonical_alias(room.matrix_room_id),
                None,
                self.timeout,
                f"canonical alias lookup for {room.matrix_room_id}",
            )
            if alias:
                return alias
            logger.debug(f"Room {room.matrix_room_id} does not have a canonical alias")

        name = await call_with_fallback(
            self.channel_names.get_channel_name(channel_id),
            None,
            self.timeout,
            f"channel name lookup for {channel_id}",
        )
        return f"#{name or channel_id}"

    async def _resolve_user(self, slack_user_id: str, team_domain: str, channel_id: str) -> str:
        user_id = await call_with_fallback(
            self.identities.map_to_identity_key(slack_user_id, team_domain),
            None,
            self.timeout,
            f"identity mapping for {slack_user_id}",
        )

        profile = None
        if user_id:
            profile = await call_with_fallback(
                self.identities.lookup_profile(user_id),
                None,
                self.timeout,
                f"profile lookup for {user_id}",
            )

        if profile is None:
            # Users that are not known locally cannot be pilled
            logger.warning(f"Mentioned user {slack_user_id} not in store, looking up display name")
            display_name = await call_with_fallback(
                self.identities.lookup_display_name_for_unknown(channel_id, slack_user_id),
                None,
                self.timeout,
                f"display name lookup for {slack_user_id}",
            )
            return display_name or slack_user_id

        return make_user_link(user_id, profile.display_name or user_id)
