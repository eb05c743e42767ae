"""
Slack API Client

Responsibilities:
- conversations.info: Channel names for unbridged channel references
- users.info: Display names for users unknown to the bridge
- Token-bearing file client for snippet downloads
"""

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from slackbridge.config import get_settings
from slackbridge.integrations.slack.files import SlackFileClient
from typing import Optional
import asyncio
import logging

logger = logging.getLogger(__name__)


class SlackClient:
    """Slack API client for the lookups the message parser needs."""

    def __init__(self, token: Optional[str] = None, client: Optional[WebClient] = None):
        settings = get_settings()
        self.settings = settings
        self.token = token if token is not None else settings.slack_bot_token
        self.client = client or WebClient(token=self.token)

    async def get_channel_name(self, channel_id: str) -> str:
        """
        Look up a channel's name.

        Args:
            channel_id: Slack channel ID

        Returns:
            Channel name, or the channel ID if Slack does not return one
        """
        try:
            result = await asyncio.to_thread(
                self.client.conversations_info,
                channel=channel_id,
            )
            name = (result.get("channel") or {}).get("name")
            if name:
                logger.info(f"conversations.info: {channel_id} mapped to {name}")
                return name
            logger.info(f"conversations.info returned no result for {channel_id}")

        except SlackApiError as e:
            logger.error(f"Slack API error fetching channel {channel_id}: {e.response['error']}")
        except Exception as e:
            logger.error(f"Error fetching channel {channel_id}: {e}")

        return channel_id

    async def get_user_display_name(self, channel_id: str, user_id: str) -> str:
        """
        Look up how a Slack user is displayed.

        Prefers the profile display name, then the real name, then the
        username.

        Args:
            channel_id: Channel the user was mentioned in
            user_id: Slack user ID

        Returns:
            Display name, or the user ID if none could be found
        """
        try:
            result = await asyncio.to_thread(self.client.users_info, user=user_id)
            user = result.get("user") or {}
            profile = user.get("profile") or {}
            name = profile.get("display_name") or user.get("real_name") or user.get("name")
            if name:
                return name
            logger.info(f"users.info returned no name for {user_id} mentioned in {channel_id}")

        except SlackApiError as e:
            logger.error(f"Slack API error fetching user {user_id}: {e.response['error']}")
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")

        return user_id

    def file_client(self) -> Optional[SlackFileClient]:
        """Client able to download private files, None without a token."""
        if not self.token:
            return None
        return SlackFileClient(self.token, timeout=self.settings.file_download_timeout)
