"""
Slack Message Parser

Full parsing pipeline:
Slack event -> Blocks/Attachments (+ Files) -> References -> Markup -> Content

Edits are rendered twice (previous and current text) and turned into an
m.replace event carrying a readable diff.
"""

import logging
from typing import List, Optional

from slackbridge.config import Settings, get_settings
from slackbridge.formatting.blocks import render
from slackbridge.formatting.content import make_event_content, merge_fragments
from slackbridge.formatting.diff import make_edit
from slackbridge.formatting.files import FileResolver
from slackbridge.formatting.markup import transpile
from slackbridge.formatting.references import ReferenceResolver
from slackbridge.integrations.slack.files import SlackFileClient
from slackbridge.integrations.slack.permalink import make_permalink
from slackbridge.models.matrix import MessageEventContent, MessageType, RenderedMessage
from slackbridge.models.slack import MessageKind, SlackMessageEvent
from slackbridge.services.ports import (
    ChannelNameLookup,
    EventStore,
    IdentityDirectory,
    RoomDirectory,
)
from slackbridge.utils.helpers import call_with_fallback

logger = logging.getLogger(__name__)


class MessageParser:
    """
    Parses the content of a Slack message into an m.room.message event.

    Pipeline steps:
    1. Drop unhandled subtypes
    2. Resolve attached files
    3. Render blocks and attachments (or fall back to the message text)
    4. Resolve channel and user references
    5. Transpile mrkdwn into plain and HTML bodies
    6. Build the content, as an edit if the message replaces a bridged one
    """

    def __init__(
        self,
        rooms: RoomDirectory,
        identities: IdentityDirectory,
        channel_names: ChannelNameLookup,
        events: EventStore,
        file_client: Optional[SlackFileClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.events = events
        self.file_client = file_client
        self.references = ReferenceResolver(
            rooms, identities, channel_names, timeout=self.settings.lookup_timeout
        )
        self.files = FileResolver()

    async def parse(self, message: SlackMessageEvent) -> Optional[MessageEventContent]:
        """
        Parse a Slack message.

        Args:
            message: Slack message event

        Returns:
            MessageEventContent, or None if nothing should be sent

        Raises:
            MalformedPermalinkError: If a shared file has an unparseable public permalink
        """
        kind = message.kind
        if kind is None:
            logger.debug(f"Ignoring message {message.ts} with subtype {message.subtype}")
            return None

        # Step 1: Files
        fragments: List[RenderedMessage] = []
        for file in message.files:
            fragment = await self.files.resolve(
                file, self.file_client, self.settings.max_upload_size
            )
            if fragment:
                fragments.append(fragment)

        # Step 2: Blocks and attachments
        text = render(message.blocks, message.attachments)
        if text.strip() == "":
            text = message.text or ""

        if text == "" and not fragments:
            return None

        # Step 3: Text pipeline
        team_domain = await self._get_team_domain(message)
        external_url = self._get_external_url(message, team_domain)

        parsed_text = None
        if text:
            parsed_text = await self.render_text(text, message.channel, team_domain, external_url)

        rendered = merge_fragments([parsed_text, *fragments])
        if rendered is None or not rendered.body.strip():
            logger.debug(f"Message {message.ts} rendered to an empty body, skipping")
            return None
        if rendered.external_url is None and external_url:
            rendered = rendered.model_copy(update={"external_url": external_url})

        msgtype = self._message_type(kind)

        # Step 4: Edits
        previous = message.previous_message
        if kind == MessageKind.EDIT and previous is not None and previous.text:
            previous_event = None
            if previous.ts:
                previous_event = await call_with_fallback(
                    self.events.get_event_by_origin_id(message.channel, previous.ts),
                    None,
                    self.settings.lookup_timeout,
                    f"event lookup for {message.channel}/{previous.ts}",
                )

            # An edit of an unknown event is treated as a new message
            if previous_event is None:
                logger.warning(f"Previous event not found when editing message. message.ts: {message.ts}")
                return make_event_content(rendered, msgtype)

            parsed_previous = await self.render_text(
                previous.text, message.channel, team_domain, external_url
            )
            edit = make_edit(rendered, parsed_previous, previous_event.event_id)
            return make_event_content(edit, msgtype)

        return make_event_content(rendered, msgtype)

    async def render_text(
        self,
        text: str,
        channel_id: str,
        team_domain: Optional[str],
        external_url: Optional[str] = None,
    ) -> RenderedMessage:
        """Resolve references in Slack text and transpile it."""
        text = await self.references.resolve_channel_refs(text)
        if team_domain:
            text = await self.references.resolve_user_refs(text, team_domain, channel_id)

        transpiled = transpile(text)
        return RenderedMessage(
            body=transpiled.plain,
            formatted_body=transpiled.formatted,
            external_url=external_url,
        )

    async def _get_team_domain(self, message: SlackMessageEvent) -> Optional[str]:
        if not message.team:
            return None
        return await call_with_fallback(
            self.events.get_team_domain(message.team),
            None,
            self.settings.lookup_timeout,
            f"team domain lookup for {message.team}",
        )

    @staticmethod
    def _get_external_url(message: SlackMessageEvent, team_domain: Optional[str]) -> Optional[str]:
        if not team_domain:
            return None
        return make_permalink(team_domain, message.channel, message.ts, message.thread_ts)

    def _message_type(self, kind: MessageKind) -> MessageType:
        if kind == MessageKind.EMOTE:
            return MessageType.EMOTE
        if kind == MessageKind.BOT and self.settings.bot_messages_as_notice:
            return MessageType.NOTICE
        return MessageType.TEXT
