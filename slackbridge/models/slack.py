"""
Slack Event Models

Validated shapes of the Slack message events the parser consumes:
blocks, legacy attachments, attached files and the message itself.
"""

from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class MessageKind(str, Enum):
    """Message subtypes the parser knows how to render."""

    PLAIN = "plain"
    EMOTE = "me_message"
    BOT = "bot_message"
    FILE_COMMENT = "file_comment"
    EDIT = "message_changed"


class SlackTextObject(BaseModel):
    """Block Kit text object (plain_text or mrkdwn)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = "mrkdwn"
    text: str = ""


class SlackBlockElement(BaseModel):
    """Element of a context (or any other) block."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = ""
    # mrkdwn/plain_text elements carry a bare string, buttons carry an object
    text: Optional[Union[str, SlackTextObject]] = None

    @property
    def text_value(self) -> Optional[str]:
        if isinstance(self.text, SlackTextObject):
            return self.text.text
        return self.text


class SlackBlock(BaseModel):
    """Block Kit block. Only header, section, context and divider render."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    text: Optional[SlackTextObject] = None
    fields: Optional[List[SlackTextObject]] = None
    elements: Optional[List[SlackBlockElement]] = None


class SlackAttachment(BaseModel):
    """Legacy message attachment."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    blocks: Optional[List[SlackBlock]] = None
    fallback: Optional[str] = None
    text: Optional[str] = None
    pretext: Optional[str] = None
    title: Optional[str] = None
    title_link: Optional[str] = None
    author_name: Optional[str] = None


class SlackFile(BaseModel):
    """File shared alongside a message."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: Optional[str] = None
    title: Optional[str] = None
    url_private: Optional[str] = None
    permalink_public: Optional[str] = None
    public_url_shared: bool = False
    size: int = 0
    mode: Optional[str] = None  # "snippet", "hosted", "external", ...
    filetype: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.title or self.id


class PreviousMessage(BaseModel):
    """Snapshot of a message before it was edited."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    ts: Optional[str] = None
    text: Optional[str] = None


class SlackMessageEvent(BaseModel):
    """Flattened Slack message event."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    channel: str
    ts: str  # Message timestamp, unique per channel
    thread_ts: Optional[str] = None
    team: Optional[str] = Field(None, alias="team_id")
    subtype: Optional[str] = None
    text: Optional[str] = None
    blocks: List[SlackBlock] = []
    attachments: List[SlackAttachment] = []
    files: List[SlackFile] = []
    previous_message: Optional[PreviousMessage] = None

    @property
    def kind(self) -> Optional[MessageKind]:
        """Subtype as a MessageKind, None when the subtype is not handled."""
        if self.subtype is None:
            return MessageKind.PLAIN
        try:
            kind = MessageKind(self.subtype)
        except ValueError:
            return None
        # "plain" is not a Slack subtype
        return None if kind == MessageKind.PLAIN else kind

    @classmethod
    def from_event(cls, payload: Dict[str, Any]) -> "SlackMessageEvent":
        """
        Build a message from a raw Slack event payload.

        ``message_changed`` events nest the edited message under ``message``;
        its content is lifted to the top level while channel, subtype and
        team are kept from the envelope.

        Args:
            payload: Slack event dictionary

        Returns:
            SlackMessageEvent
        """
        if payload.get("subtype") != MessageKind.EDIT.value or "message" not in payload:
            return cls.model_validate(payload)

        current = payload["message"]
        flattened = {
            **current,
            "channel": payload.get("channel", current.get("channel")),
            "subtype": MessageKind.EDIT.value,
            "team_id": payload.get("team") or payload.get("team_id") or current.get("team"),
            "previous_message": payload.get("previous_message"),
        }
        flattened.pop("team", None)
        return cls.model_validate(flattened)
