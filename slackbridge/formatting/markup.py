"""
Markup Transpiler

Converts Slack mrkdwn (plus the markdown produced by the block renderer)
into a Matrix plain body and an org.matrix.custom.html body.

Pipeline:
1. Unescape the entities Slack escapes (&lt; &gt; &amp;)
2. Broadcast mentions (<!channel>, <!here>, <!everyone>) -> @room
3. Emoji shortcodes -> glyphs
4. Plain body: Matrix user links reduced to their display name
5. HTML body: mrkdwn -> HTML, then markdown -> HTML, then sanitised
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

import emoji
import mistune
import nh3

logger = logging.getLogger(__name__)

ROOM_MENTION = "@room"

BROADCAST_PATTERN = re.compile(r"<!(?:channel|here|everyone)(?:\|[^>]*)?>")
EMOJI_PATTERN = re.compile(r":([\w+'-]+):")
USER_LINK_PATTERN = re.compile(r"<https://matrix\.to/#/@[^|>\s]+:[^|>\s]+\|([^>]+)>")

# Slack names the emoji alias table does not know
SLACK_EMOJI = {
    "simple_smile": "\U0001F642",
    "skin-tone-2": "\U0001F3FB",
    "skin-tone-3": "\U0001F3FC",
    "skin-tone-4": "\U0001F3FD",
    "skin-tone-5": "\U0001F3FE",
    "skin-tone-6": "\U0001F3FF",
}

# mrkdwn constructs, converted before the markdown pass
CODE_BLOCK_PATTERN = re.compile(r"```\n?(.*?)\n?```", re.DOTALL)
INLINE_CODE_PATTERN = re.compile(r"`[^`\n]+`")
LINK_PATTERN = re.compile(r"<((?:https?://|mailto:)[^|>\s]+)(?:\|([^>]*))?>")
BOLD_PATTERN = re.compile(r"(?<![\w*])\*(?=\S)([^*\n]+?)(?<=\S)\*(?![\w*])")
ITALIC_PATTERN = re.compile(r"(?<![\w_])_(?=\S)([^_\n]+?)(?<=\S)_(?![\w_])")
STRIKE_PATTERN = re.compile(r"(?<![\w~])~(?=\S)([^~\n]+?)(?<=\S)~(?![\w~])")
PLACEHOLDER_PATTERN = re.compile(r"\x00(\d+)\x00")
PRE_PATTERN = re.compile(r"(<pre>.*?</pre>)", re.DOTALL)

# Raw HTML is let through so the mrkdwn stage output survives, nh3 cleans up
MARKDOWN = mistune.create_markdown(
    escape=False,
    hard_wrap=True,
    plugins=["strikethrough"],
)

# Subset of the tags and attributes Matrix clients are expected to render
MATRIX_ALLOWED_HTML_TAGS = {
    "p", "a", "b", "i", "u", "s", "strong", "em", "del", "strike",
    "code", "pre", "blockquote", "ul", "ol", "li", "hr", "br",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "font", "span", "sup", "sub",
    "table", "thead", "tbody", "tr", "th", "td",
}
MATRIX_ALLOWED_HTML_ATTRIBUTES = {
    "a": {"href"},
    "code": {"class"},
    "ol": {"start"},
    "font": {"color", "data-mx-color", "data-mx-bg-color"},
    "span": {"data-mx-color", "data-mx-bg-color"},
}
MATRIX_ALLOWED_URL_SCHEMES = {"https", "http", "mailto", "matrix"}


@dataclass(frozen=True)
class TranspiledText:
    """Plain body and optional HTML body."""

    plain: str
    formatted: Optional[str] = None


def unescape_entities(text: str) -> str:
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def replace_broadcasts(text: str) -> str:
    return BROADCAST_PATTERN.sub(ROOM_MENTION, text)


def emoji_fallback(name: str) -> str:
    """Glyph for a Slack-only shortcode, else the shortcode left as typed."""
    return SLACK_EMOJI.get(name, f":{name}:")


def emojify(text: str) -> str:
    def replace(match: re.Match) -> str:
        shortcode = match.group(0)
        glyph = emoji.emojize(shortcode, language="alias")
        if glyph != shortcode:
            return glyph
        return emoji_fallback(match.group(1))

    return EMOJI_PATTERN.sub(replace, text)


def strip_user_links(text: str) -> str:
    return USER_LINK_PATTERN.sub(r"\1", text)


def mrkdwn_to_html(text: str) -> str:
    """
    Convert Slack-specific mrkdwn into HTML the markdown pass leaves alone.

    Code is protected from emphasis handling; inline code is restored verbatim
    for the markdown pass to render.
    """
    stash: List[str] = []

    def keep(value: str) -> str:
        stash.append(value)
        return f"\x00{len(stash) - 1}\x00"

    def code_block(match: re.Match) -> str:
        code = html.escape(match.group(1), quote=False)
        return keep(f"\n<pre><code>{code}</code></pre>\n")

    def link(match: re.Match) -> str:
        url, label = match.group(1), match.group(2)
        label = html.escape(label or url, quote=False)
        return keep(f'<a href="{html.escape(url)}">{label}</a>')

    text = CODE_BLOCK_PATTERN.sub(code_block, text)
    text = INLINE_CODE_PATTERN.sub(lambda match: keep(match.group(0)), text)
    text = LINK_PATTERN.sub(link, text)

    text = BOLD_PATTERN.sub(r"<strong>\1</strong>", text)
    text = ITALIC_PATTERN.sub(r"<em>\1</em>", text)
    text = STRIKE_PATTERN.sub(r"<del>\1</del>", text)

    return PLACEHOLDER_PATTERN.sub(lambda match: stash[int(match.group(1))], text)


def sanitize_html(formatted: str) -> str:
    return nh3.clean(
        formatted,
        tags=MATRIX_ALLOWED_HTML_TAGS,
        attributes=MATRIX_ALLOWED_HTML_ATTRIBUTES,
        url_schemes=MATRIX_ALLOWED_URL_SCHEMES,
        link_rel=None,
    )


def collapse_newlines(formatted: str) -> str:
    """Drop newlines between tags, keeping those inside <pre> blocks."""
    parts = PRE_PATTERN.split(formatted)
    return "".join(
        part if part.startswith("<pre>") else part.replace("\n", "")
        for part in parts
    )


def render_html(text: str) -> str:
    formatted = MARKDOWN(mrkdwn_to_html(text))
    formatted = sanitize_html(formatted).strip()
    return collapse_newlines(formatted)


def transpile(text: str) -> TranspiledText:
    """
    Convert normalized Slack text into Matrix bodies.

    The HTML body is dropped when it is nothing more than the plain body
    wrapped in a paragraph.

    Args:
        text: Slack text with references already resolved; trailing
            whitespace is dropped

    Returns:
        TranspiledText
    """
    text = unescape_entities(text.rstrip())
    text = replace_broadcasts(text)
    text = emojify(text)

    plain = strip_user_links(text)
    formatted = render_html(text)

    if formatted == f"<p>{plain}</p>":
        return TranspiledText(plain=plain)

    logger.debug("Message has formatting, keeping formatted body")
    return TranspiledText(plain=plain, formatted=formatted)
