"""
Tests for channel and user reference resolution.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from slackbridge.formatting.markup import transpile
from slackbridge.formatting.references import (
    CHANNEL_REF_PATTERN,
    ReferenceResolver,
    find_references,
    make_user_link,
)
from slackbridge.services.memory import InMemoryIdentityDirectory, InMemoryRoomDirectory


@pytest.fixture
def rooms():
    directory = InMemoryRoomDirectory()
    directory.add_room("C1", "!general:example.org", alias="#general:example.org")
    directory.add_room("C3", "!noalias:example.org")
    return directory


@pytest.fixture
def identities():
    slack = AsyncMock()
    slack.get_user_display_name.return_value = "Bob from Slack"
    directory = InMemoryIdentityDirectory("example.org", "slack_", slack=slack)
    directory.add_profile("@slack_myteam_U1:example.org", "Alice")
    directory.add_profile("@slack_myteam_U2:example.org")
    return directory


@pytest.fixture
def resolver(rooms, identities, channel_names):
    return ReferenceResolver(rooms, identities, channel_names, timeout=1.0)


def test_find_references():
    """Test spans are reported against the original text."""
    spans = find_references("a <#C1> b <#C2|random>", CHANNEL_REF_PATTERN)
    assert [(span.start, span.end, span.ref_id) for span in spans] == [
        (2, 7, "C1"),
        (10, 22, "C2"),
    ]


class TestMakeUserLink:
    """Test suite for user link labels."""

    def test_plain_name(self):
        """Test a simple display name is used as the label."""
        assert make_user_link("@u:example.org", "Alice") == "<https://matrix.to/#/@u:example.org|Alice>"

    def test_delimiters_dropped(self):
        """Test characters that would close the link are removed from the label."""
        assert make_user_link("@u:example.org", "<A|B>") == "<https://matrix.to/#/@u:example.org|AB>"

    def test_label_of_only_delimiters(self):
        """Test an empty label after cleaning falls back to the user id."""
        assert make_user_link("@u:example.org", "<>") == (
            "<https://matrix.to/#/@u:example.org|@u:example.org>"
        )


class TestChannelRefs:
    """Test suite for channel references."""

    @pytest.mark.asyncio
    async def test_bridged_room_uses_alias(self, resolver):
        """Test a bridged room is referred to by its canonical alias."""
        assert await resolver.resolve_channel_refs("<#C1>") == "#general:example.org"

    @pytest.mark.asyncio
    async def test_unbridged_channel_uses_name(self, resolver):
        """Test an unbridged channel is referred to by its Slack name."""
        assert await resolver.resolve_channel_refs("see <#C2|random>") == "see #random"

    @pytest.mark.asyncio
    async def test_bridged_room_without_alias_uses_name(self, resolver):
        """Test a bridged room without alias falls back to the channel name."""
        assert await resolver.resolve_channel_refs("<#C3>") == "#no-alias"

    @pytest.mark.asyncio
    async def test_unknown_channel_uses_id(self, resolver):
        """Test a channel without a known name is shown by id."""
        assert await resolver.resolve_channel_refs("<#C9>") == "#C9"

    @pytest.mark.asyncio
    async def test_failed_name_lookup_uses_id(self, rooms, identities):
        """Test a failing name lookup falls back to the channel id."""
        channel_names = AsyncMock()
        channel_names.get_channel_name.side_effect = RuntimeError("slack down")
        resolver = ReferenceResolver(rooms, identities, channel_names)

        assert await resolver.resolve_channel_refs("<#C2>") == "#C2"

    @pytest.mark.asyncio
    async def test_slow_lookup_times_out(self, identities, channel_names):
        """Test a slow room lookup is abandoned after the timeout."""
        async def slow_lookup(channel_id):
            await asyncio.sleep(5)

        rooms = AsyncMock()
        rooms.lookup_bridged_room.side_effect = slow_lookup
        resolver = ReferenceResolver(rooms, identities, channel_names, timeout=0.01)

        assert await resolver.resolve_channel_refs("<#C2>") == "#random"

    @pytest.mark.asyncio
    async def test_offsets_survive_length_changes(self, resolver):
        """Test replacements of different lengths do not shift later tokens."""
        text = "<#C1> and <#C2|a-much-longer-display-hint> then <#C1|g>."
        assert await resolver.resolve_channel_refs(text) == (
            "#general:example.org and #random then #general:example.org."
        )

    @pytest.mark.asyncio
    async def test_each_token_visited_once(self, rooms, identities):
        """Test replacements are not scanned again, even if they look like tokens."""
        channel_names = AsyncMock()
        channel_names.get_channel_name.return_value = "<#C7>"
        resolver = ReferenceResolver(rooms, identities, channel_names)

        result = await resolver.resolve_channel_refs("<#C5> <#C6>")

        assert result == "#<#C7> #<#C7>"
        assert [call.args[0] for call in channel_names.get_channel_name.await_args_list] == ["C5", "C6"]


class TestUserRefs:
    """Test suite for user references."""

    @pytest.mark.asyncio
    async def test_known_user_is_linked(self, resolver):
        """Test a known user becomes a matrix.to link with their display name."""
        result = await resolver.resolve_user_refs("hi <@U1>", "myteam", "C1")
        assert result == "hi <https://matrix.to/#/@slack_myteam_U1:example.org|Alice>"

    @pytest.mark.asyncio
    async def test_known_user_without_display_name(self, resolver):
        """Test a known user without display name is labelled by user id."""
        result = await resolver.resolve_user_refs("<@U2|bob>", "myteam", "C1")
        assert result == (
            "<https://matrix.to/#/@slack_myteam_U2:example.org|@slack_myteam_U2:example.org>"
        )

    @pytest.mark.asyncio
    async def test_display_name_with_angle_bracket(self, resolver, identities):
        """Test a display name containing '>' still yields a whole pill."""
        identities.add_profile("@slack_myteam_U5:example.org", "A>B")

        resolved = await resolver.resolve_user_refs("hi <@U5> there", "myteam", "C1")
        result = transpile(resolved)

        assert result.plain == "hi AB there"
        assert result.formatted == (
            '<p>hi <a href="https://matrix.to/#/@slack_myteam_U5:example.org">AB</a> there</p>'
        )

    @pytest.mark.asyncio
    async def test_unknown_user_plain_name(self, resolver, identities):
        """Test an unknown user is replaced by the name Slack reports."""
        result = await resolver.resolve_user_refs("ping <@U3>", "myteam", "C1")

        assert result == "ping Bob from Slack"
        identities.slack.get_user_display_name.assert_awaited_once_with("C1", "U3")

    @pytest.mark.asyncio
    async def test_identity_mapping_is_team_scoped(self, resolver):
        """Test the same user id in another team is not the known user."""
        result = await resolver.resolve_user_refs("<@U1>", "otherteam", "C1")
        assert result == "Bob from Slack"

    @pytest.mark.asyncio
    async def test_failed_lookups_fall_back_to_id(self, rooms, channel_names):
        """Test failing identity lookups leave the raw user id."""
        identities = AsyncMock()
        identities.map_to_identity_key.side_effect = RuntimeError("down")
        identities.lookup_display_name_for_unknown.side_effect = RuntimeError("down")
        resolver = ReferenceResolver(rooms, identities, channel_names)

        assert await resolver.resolve_user_refs("<@U4> ok", "myteam", "C1") == "U4 ok"
        identities.lookup_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_multiple_users_in_order(self, resolver):
        """Test several mentions are resolved in document order."""
        result = await resolver.resolve_user_refs("<@U1>, <@U3> and <@U1>", "myteam", "C1")
        assert result == (
            "<https://matrix.to/#/@slack_myteam_U1:example.org|Alice>, Bob from Slack and "
            "<https://matrix.to/#/@slack_myteam_U1:example.org|Alice>"
        )
