"""
File Resolver

Decides how a file shared in Slack shows up in Matrix: snippets are inlined
as code blocks, files we cannot (or should not) fetch become links.
"""

import html
import logging
from typing import Optional

from slackbridge.integrations.slack.files import FileDownloadError, SlackFileClient
from slackbridge.integrations.slack.permalink import public_file_url
from slackbridge.models.matrix import RenderedMessage
from slackbridge.models.slack import SlackFile

logger = logging.getLogger(__name__)

SNIPPET_MODE = "snippet"


def file_url(file: SlackFile) -> str:
    """Public download URL when the file has been shared publicly, else url_private."""
    if file.public_url_shared and file.permalink_public:
        return public_file_url(file.url_private, file.permalink_public)
    return file.url_private


def make_link(file: SlackFile) -> RenderedMessage:
    url = file_url(file)
    name = file.display_name
    return RenderedMessage(
        body=f"{url} ({name})",
        formatted_body=f'<a href="{html.escape(url)}">{html.escape(name)}</a>',
    )


def make_code_block(content: str, filetype: Optional[str] = None) -> RenderedMessage:
    opening = "<pre><code>"
    if filetype:
        opening = f'<pre><code class="language-{html.escape(filetype)}">'
    return RenderedMessage(
        body=f"```\n{content}\n```",
        formatted_body=f"{opening}{html.escape(content, quote=False)}</code></pre>",
    )


class FileResolver:
    """Turns Slack files into rendered fragments."""

    async def resolve(
        self,
        file: SlackFile,
        client: Optional[SlackFileClient] = None,
        max_inline_size: Optional[int] = None,
    ) -> Optional[RenderedMessage]:
        """
        Render a file as a link or an inline snippet.

        Args:
            file: File attached to the message
            client: Client able to read the file, None if nobody can
            max_inline_size: Size in bytes above which files are only linked

        Returns:
            RenderedMessage fragment, or None if the file is left out

        Raises:
            MalformedPermalinkError: If a public file permalink cannot be parsed
        """
        if not file.url_private:
            logger.warning(f"Slack file {file.id} lacks a url_private, not handling file")
            return None

        if client is None or not client.token:
            logger.warning(f"No client (or token) can handle file {file.id}, parsing as link")
            return make_link(file)

        if max_inline_size is not None and file.size > max_inline_size:
            logger.warning(
                f"File {file.id} too large ({file.size / 1024:.1f}KiB > {max_inline_size / 1024:.1f}KiB), "
                "parsing as link"
            )
            return make_link(file)

        if file.mode == SNIPPET_MODE:
            return await self._resolve_snippet(file, client)

        logger.debug(f"File {file.id} with mode {file.mode} is not handled")
        return None

    async def _resolve_snippet(
        self, file: SlackFile, client: SlackFileClient
    ) -> Optional[RenderedMessage]:
        try:
            content = await client.fetch_text(file.url_private)
        except FileDownloadError as e:
            logger.error(f"Failed to download snippet {file.id}: {e}")
            return None

        if not content.strip():
            return None

        return make_code_block(content, file.filetype)
