# Slack -> Matrix message formatting
from slackbridge.formatting.blocks import render, render_attachment, render_blocks
from slackbridge.formatting.content import make_event_content, merge_fragments
from slackbridge.formatting.diff import Diff, make_diff, make_edit
from slackbridge.formatting.files import FileResolver
from slackbridge.formatting.markup import TranspiledText, transpile
from slackbridge.formatting.references import ReferenceResolver

__all__ = [
    "render",
    "render_attachment",
    "render_blocks",
    "make_event_content",
    "merge_fragments",
    "Diff",
    "make_diff",
    "make_edit",
    "FileResolver",
    "TranspiledText",
    "transpile",
    "ReferenceResolver",
]
