"""
Edit Diff

Word-level comparison of two renderings of the same message and the
"(edited) ... => ..." notice built from it.
"""

import html
import re
from dataclasses import dataclass
from typing import List

from slackbridge.models.matrix import EditNotice, RenderedMessage

WORD_PATTERN = re.compile(r"\S+")


@dataclass(frozen=True)
class Diff:
    """Common prefix/suffix and the differing middle of an edit."""

    before: str
    prev: str
    curr: str
    after: str


def _span(text: str, words: List[re.Match], start: int, end: int) -> str:
    """Text from the start of words[start] to the end of words[end - 1]."""
    if start >= end:
        return ""
    return text[words[start].start():words[end - 1].end()]


def make_diff(previous: str, current: str) -> Diff:
    """
    Split an edit into before/prev/curr/after.

    ``before`` and ``after`` are the longest runs of words shared at the start
    and end of both texts; they never overlap. Segments keep the whitespace
    found inside them in the current (or previous) text.

    Args:
        previous: Body before the edit
        current: Body after the edit

    Returns:
        Diff
    """
    prev_words = list(WORD_PATTERN.finditer(previous))
    curr_words = list(WORD_PATTERN.finditer(current))
    shortest = min(len(prev_words), len(curr_words))

    prefix = 0
    while prefix < shortest and prev_words[prefix].group() == curr_words[prefix].group():
        prefix += 1

    suffix = 0
    while (
        suffix < shortest - prefix
        and prev_words[-suffix - 1].group() == curr_words[-suffix - 1].group()
    ):
        suffix += 1

    return Diff(
        before=_span(current, curr_words, 0, prefix),
        prev=_span(previous, prev_words, prefix, len(prev_words) - suffix),
        curr=_span(current, curr_words, prefix, len(curr_words) - suffix),
        after=_span(current, curr_words, len(curr_words) - suffix, len(curr_words)),
    )


def make_edit(
    current: RenderedMessage,
    previous: RenderedMessage,
    replaces_event_id: str,
) -> EditNotice:
    """Build the edit notice replacing ``replaces_event_id`` with ``current``."""
    edits = make_diff(previous.body, current.body)
    before = html.escape(edits.before)
    prev = html.escape(edits.prev)
    curr = html.escape(edits.curr)
    after = html.escape(edits.after)

    body = (
        f"(edited) {edits.before} {edits.prev} {edits.after} => "
        f"{edits.before} {edits.curr} {edits.after}"
    )
    formatted_body = (
        f"<i>(edited)</i> {before} <font color=\"red\">{prev}</font> {after} =&gt; "
        f"{before} <font color=\"green\">{curr}</font> {after}"
    )

    return EditNotice(
        body=body,
        formatted_body=formatted_body,
        external_url=current.external_url,
        new_content=current,
        replaces_event_id=replaces_event_id,
    )
