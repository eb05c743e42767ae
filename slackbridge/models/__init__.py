# Data models
from slackbridge.models.slack import (
    MessageKind,
    SlackAttachment,
    SlackBlock,
    SlackFile,
    SlackMessageEvent,
)
from slackbridge.models.matrix import (
    BridgedRoom,
    EditNotice,
    MessageEventContent,
    MessageType,
    RenderedMessage,
    StoredEvent,
    UserProfile,
)

__all__ = [
    "MessageKind",
    "SlackAttachment",
    "SlackBlock",
    "SlackFile",
    "SlackMessageEvent",
    "BridgedRoom",
    "EditNotice",
    "MessageEventContent",
    "MessageType",
    "RenderedMessage",
    "StoredEvent",
    "UserProfile",
]
