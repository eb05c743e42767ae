"""Lookup interfaces the message parser reads from."""

from typing import Optional, Protocol, runtime_checkable

from slackbridge.models.matrix import BridgedRoom, StoredEvent, UserProfile


@runtime_checkable
class RoomDirectory(Protocol):
    """Bridged rooms and their Matrix state."""

    async def lookup_bridged_room(self, channel_id: str) -> Optional[BridgedRoom]: ...

    async def get_canonical_alias(self, room_id: str) -> Optional[str]: ...


@runtime_checkable
class IdentityDirectory(Protocol):
    """Mapping of Slack users onto Matrix identities."""

    async def map_to_identity_key(self, slack_user_id: str, team_domain: str) -> str: ...

    async def lookup_profile(self, user_id: str) -> Optional[UserProfile]: ...

    async def lookup_display_name_for_unknown(
        self, channel_id: str, slack_user_id: str
    ) -> str: ...


@runtime_checkable
class ChannelNameLookup(Protocol):
    """Slack channel names."""

    async def get_channel_name(self, channel_id: str) -> str: ...


@runtime_checkable
class EventStore(Protocol):
    """Events already bridged, and team metadata."""

    async def get_event_by_origin_id(
        self, channel_id: str, ts: str
    ) -> Optional[StoredEvent]: ...

    async def get_team_domain(self, team_id: str) -> Optional[str]: ...
