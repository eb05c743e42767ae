"""
Tests for the Slack API client lookups.
"""

from unittest.mock import MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from slackbridge.integrations.slack.client import SlackClient


def api_error(error: str) -> SlackApiError:
    return SlackApiError(message=error, response={"ok": False, "error": error})


@pytest.fixture
def web_client():
    return MagicMock()


@pytest.fixture
def slack(web_client):
    return SlackClient(token="xoxb-test", client=web_client)


class TestChannelName:
    """Test suite for conversations.info lookups."""

    @pytest.mark.asyncio
    async def test_name_returned(self, slack, web_client):
        """Test the channel name from conversations.info."""
        web_client.conversations_info.return_value = {"ok": True, "channel": {"id": "C1", "name": "general"}}

        assert await slack.get_channel_name("C1") == "general"
        web_client.conversations_info.assert_called_once_with(channel="C1")

    @pytest.mark.asyncio
    async def test_api_error_falls_back_to_id(self, slack, web_client):
        """Test a Slack API error falls back to the channel id."""
        web_client.conversations_info.side_effect = api_error("channel_not_found")
        assert await slack.get_channel_name("C404") == "C404"

    @pytest.mark.asyncio
    async def test_missing_name_falls_back_to_id(self, slack, web_client):
        """Test a channel without name falls back to its id."""
        web_client.conversations_info.return_value = {"ok": True, "channel": {"id": "D1"}}
        assert await slack.get_channel_name("D1") == "D1"


class TestUserDisplayName:
    """Test suite for users.info lookups."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "user, expected",
        [
            ({"name": "alice", "real_name": "Alice Liddell", "profile": {"display_name": "ally"}}, "ally"),
            ({"name": "alice", "real_name": "Alice Liddell", "profile": {"display_name": ""}}, "Alice Liddell"),
            ({"name": "alice"}, "alice"),
            ({}, "U1"),
        ],
    )
    async def test_preference_order(self, slack, web_client, user, expected):
        """Test display name, real name and username are tried in order."""
        web_client.users_info.return_value = {"ok": True, "user": user}
        assert await slack.get_user_display_name("C1", "U1") == expected

    @pytest.mark.asyncio
    async def test_error_falls_back_to_id(self, slack, web_client):
        """Test a Slack API error falls back to the user id."""
        web_client.users_info.side_effect = api_error("user_not_found")
        assert await slack.get_user_display_name("C1", "U9") == "U9"


def test_file_client_requires_token(web_client):
    """Test a file client is only built with a token."""
    assert SlackClient(token="", client=web_client).file_client() is None

    file_client = SlackClient(token="xoxb-test", client=web_client).file_client()
    assert file_client.token == "xoxb-test"
