"""
Block Kit Renderer

Turns Slack blocks and legacy attachments into line-oriented markdown
that the markup transpiler understands.
"""

from typing import Callable, Dict, Iterable

from slackbridge.models.slack import SlackAttachment, SlackBlock

DIVIDER = "----"
QUOTE_PREFIX = "> "


def _render_header(block: SlackBlock) -> str:
    if block.text:
        return f"# {block.text.text}\n"
    return ""


def _render_section(block: SlackBlock) -> str:
    content = ""
    if block.text:
        content += f"{block.text.text}\n"
        if block.fields:
            # Separate text from fields with an empty line
            content += "\n"
    for field in block.fields or []:
        content += f"{field.text}\n"
    return content


def _render_context(block: SlackBlock) -> str:
    content = ""
    for element in block.elements or []:
        text = element.text_value
        if text:
            content += f"{text}\n"
    return content


def _render_divider(block: SlackBlock) -> str:
    return f"{DIVIDER}\n"


_BLOCK_RENDERERS: Dict[str, Callable[[SlackBlock], str]] = {
    "header": _render_header,
    "section": _render_section,
    "context": _render_context,
    "divider": _render_divider,
}


def render_block(block: SlackBlock) -> str:
    """Render a single block, followed by a blank line unless it is empty."""
    renderer = _BLOCK_RENDERERS.get(block.type)
    if renderer is None:
        return ""

    content = renderer(block)
    if not content:
        return ""
    return f"{content}\n"


def render_blocks(blocks: Iterable[SlackBlock]) -> str:
    return "".join(render_block(block) for block in blocks)


def render_attachment(attachment: SlackAttachment) -> str:
    """
    Render a legacy attachment as a quoted unit.

    Attachments with blocks reuse the block renderer. Otherwise the title
    (linked when title_link is set) and author are put above the text, or the
    fallback is used when there is no text at all.

    Args:
        attachment: Slack attachment

    Returns:
        Markdown with every line quoted, preceded by the pretext if any
    """
    content = ""

    if attachment.blocks:
        content += render_blocks(attachment.blocks)
    elif not attachment.text:
        content += attachment.fallback or ""
    else:
        if attachment.title:
            if attachment.title_link:
                content += f"**[{attachment.title}]({attachment.title_link})**\n"
            else:
                content += f"**{attachment.title}**\n"

        if attachment.author_name:
            content += f"**{attachment.author_name}**\n"

        content += attachment.text

    content = QUOTE_PREFIX + content.replace("\n", "\n" + QUOTE_PREFIX)

    if attachment.pretext:
        content = f"{attachment.pretext}\n{content}"

    return content


def render(blocks: Iterable[SlackBlock], attachments: Iterable[SlackAttachment]) -> str:
    """Render blocks first, then every attachment, in order."""
    text = render_blocks(blocks)
    for attachment in attachments:
        if text and not text.endswith("\n"):
            text += "\n"
        text += render_attachment(attachment)
    return text
