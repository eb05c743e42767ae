"""
In-Memory Directories

Dictionary-backed implementations of the lookup ports. Unknown users are
looked up in Slack.
"""

import logging
from typing import Dict, Optional

from slackbridge.models.matrix import BridgedRoom, StoredEvent, UserProfile
from slackbridge.integrations.slack.client import SlackClient

logger = logging.getLogger(__name__)


class InMemoryRoomDirectory:
    """Bridged rooms keyed by Slack channel, aliases keyed by Matrix room."""

    def __init__(self):
        self.rooms: Dict[str, BridgedRoom] = {}
        self.aliases: Dict[str, str] = {}

    def add_room(self, slack_channel_id: str, matrix_room_id: str, alias: Optional[str] = None):
        self.rooms[slack_channel_id] = BridgedRoom(
            slack_channel_id=slack_channel_id, matrix_room_id=matrix_room_id
        )
        if alias:
            self.aliases[matrix_room_id] = alias

    async def lookup_bridged_room(self, channel_id: str) -> Optional[BridgedRoom]:
        return self.rooms.get(channel_id)

    async def get_canonical_alias(self, room_id: str) -> Optional[str]:
        return self.aliases.get(room_id)


class InMemoryIdentityDirectory:
    """
    Ghost user ids derived from the Slack user, plus known profiles.

    Ghosts are named ``@{prefix}{team_domain}_{SLACK_USER_ID}:{server_name}``.
    """

    def __init__(self, server_name: str, user_prefix: str, slack: Optional[SlackClient] = None):
        self.server_name = server_name
        self.user_prefix = user_prefix
        self.slack = slack
        self.profiles: Dict[str, UserProfile] = {}

    def add_profile(self, user_id: str, display_name: Optional[str] = None):
        self.profiles[user_id] = UserProfile(user_id=user_id, display_name=display_name)

    async def map_to_identity_key(self, slack_user_id: str, team_domain: str) -> str:
        localpart = f"{self.user_prefix}{team_domain.lower()}_{slack_user_id.upper()}"
        return f"@{localpart}:{self.server_name}"

    async def lookup_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.profiles.get(user_id)

    async def lookup_display_name_for_unknown(self, channel_id: str, slack_user_id: str) -> str:
        if self.slack is None:
            logger.debug(f"No Slack client to look up {slack_user_id}, using the user ID")
            return slack_user_id
        return await self.slack.get_user_display_name(channel_id, slack_user_id)


class InMemoryEventStore:
    """Bridged events keyed by (channel, ts), team domains keyed by team id."""

    def __init__(self):
        self.events: Dict[tuple, StoredEvent] = {}
        self.team_domains: Dict[str, str] = {}

    def add_event(self, slack_channel_id: str, slack_ts: str, event_id: str):
        self.events[(slack_channel_id, slack_ts)] = StoredEvent(
            event_id=event_id, slack_channel_id=slack_channel_id, slack_ts=slack_ts
        )

    def add_team(self, team_id: str, domain: str):
        self.team_domains[team_id] = domain

    async def get_event_by_origin_id(self, channel_id: str, ts: str) -> Optional[StoredEvent]:
        return self.events.get((channel_id, ts))

    async def get_team_domain(self, team_id: str) -> Optional[str]:
        return self.team_domains.get(team_id)
