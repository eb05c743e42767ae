"""
Content Assembler

Wraps rendered messages into m.room.message content.
"""

import html
from typing import Iterable, Optional

from slackbridge.models.matrix import (
    HTML_FORMAT,
    EditNotice,
    MessageEventContent,
    MessageType,
    RelatesTo,
    RenderedMessage,
)


def _content(rendered: RenderedMessage, msgtype: MessageType) -> MessageEventContent:
    content = MessageEventContent(
        msgtype=msgtype,
        body=rendered.body,
        external_url=rendered.external_url or None,
    )
    if rendered.formatted_body:
        content.format = HTML_FORMAT
        content.formatted_body = rendered.formatted_body
    return content


def make_event_content(
    rendered: RenderedMessage,
    msgtype: MessageType = MessageType.TEXT,
) -> MessageEventContent:
    """
    Build event content for a rendered message or an edit notice.

    Args:
        rendered: RenderedMessage, or EditNotice for edits
        msgtype: m.text, m.emote or m.notice, chosen by the caller

    Returns:
        MessageEventContent
    """
    content = _content(rendered, msgtype)

    if isinstance(rendered, EditNotice):
        content.new_content = _content(rendered.new_content, msgtype)
        content.relates_to = RelatesTo(event_id=rendered.replaces_event_id)

    return content


def merge_fragments(parts: Iterable[Optional[RenderedMessage]]) -> Optional[RenderedMessage]:
    """
    Join message text and file fragments into a single rendered message.

    Bodies are joined with newlines. The HTML body is only kept if at least
    one part has one; parts without it contribute their escaped plain body.
    """
    parts = [part for part in parts if part is not None]
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]

    body = "\n".join(part.body for part in parts)

    formatted_body = None
    if any(part.formatted_body for part in parts):
        formatted_body = "<br>".join(
            part.formatted_body or html.escape(part.body) for part in parts
        )

    external_url = next((part.external_url for part in parts if part.external_url), None)
    return RenderedMessage(body=body, formatted_body=formatted_body, external_url=external_url)
