"""
Slack API Routes

Preview of how a Slack message event is bridged to Matrix.
"""

from fastapi import APIRouter, Depends, HTTPException
from functools import lru_cache
from typing import Any, Dict
import logging
import time

from slackbridge.config import get_settings
from slackbridge.integrations.slack.client import SlackClient
from slackbridge.integrations.slack.permalink import MalformedPermalinkError
from slackbridge.models.slack import SlackMessageEvent
from slackbridge.services.memory import (
    InMemoryEventStore,
    InMemoryIdentityDirectory,
    InMemoryRoomDirectory,
)
from slackbridge.services.parser import MessageParser

logger = logging.getLogger(__name__)
router = APIRouter()


@lru_cache
def get_parser() -> MessageParser:
    """Parser backed by Slack lookups and empty in-memory directories."""
    settings = get_settings()
    slack_client = SlackClient()
    return MessageParser(
        rooms=InMemoryRoomDirectory(),
        identities=InMemoryIdentityDirectory(
            settings.matrix_server_name, settings.matrix_user_prefix, slack=slack_client
        ),
        channel_names=slack_client,
        events=InMemoryEventStore(),
        file_client=slack_client.file_client(),
        settings=settings,
    )


@router.post("/parse")
async def parse_message(
    event: Dict[str, Any],
    parser: MessageParser = Depends(get_parser),
):
    """
    Convert a Slack message event into Matrix m.room.message content.

    Accepts flat message events as well as message_changed envelopes.
    Returns {"content": null} when the message would not be bridged.
    """
    start_time = time.time()

    try:
        message = SlackMessageEvent.from_event(event)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid Slack message event: {e}")

    try:
        content = await parser.parse(message)
    except MalformedPermalinkError as e:
        logger.error(f"Unexpected Slack response shape: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    logger.info(f"Parsed message {message.ts} in {time.time() - start_time:.2f}s")
    return {"content": content.to_dict() if content else None}
