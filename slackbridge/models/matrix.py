"""
Matrix Event Content Models

Rendered message fragments and the m.room.message content built from them.
"""

from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import Any, Dict, Optional

HTML_FORMAT = "org.matrix.custom.html"


class MessageType(str, Enum):
    """m.room.message msgtypes produced by the bridge."""

    TEXT = "m.text"
    EMOTE = "m.emote"
    NOTICE = "m.notice"


class RenderedMessage(BaseModel):
    """Plain body with optional HTML body and Slack deep link."""

    model_config = ConfigDict(frozen=True)

    body: str
    formatted_body: Optional[str] = None  # Omitted when it equals <p>{body}</p>
    external_url: Optional[str] = None


class EditNotice(RenderedMessage):
    """Human-readable diff carrying the full replacement content."""

    new_content: RenderedMessage
    replaces_event_id: str


class RelatesTo(BaseModel):
    """m.relates_to of an edit."""

    rel_type: str = "m.replace"
    event_id: str


class MessageEventContent(BaseModel):
    """Content of an m.room.message event."""

    model_config = ConfigDict(populate_by_name=True)

    msgtype: MessageType = MessageType.TEXT
    body: str
    format: Optional[str] = None
    formatted_body: Optional[str] = None
    external_url: Optional[str] = None
    new_content: Optional["MessageEventContent"] = Field(None, alias="m.new_content")
    relates_to: Optional[RelatesTo] = Field(None, alias="m.relates_to")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with Matrix key names, dropping absent fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class BridgedRoom(BaseModel):
    """Matrix room bridged to a Slack channel."""

    slack_channel_id: str
    matrix_room_id: str


class UserProfile(BaseModel):
    """Locally known Matrix user."""

    user_id: str
    display_name: Optional[str] = None


class StoredEvent(BaseModel):
    """Matrix event previously sent for a Slack message."""

    event_id: str
    slack_channel_id: str
    slack_ts: str
