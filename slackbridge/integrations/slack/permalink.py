"""
Slack Permalinks

Builds message deep links and derives direct download links for publicly
shared files.
"""

import re
from typing import Optional

# https://slack-files.com/{team_id}-{file_id}-{pub_secret}
PUBLIC_FILE_PATTERN = re.compile(r"https://slack-files\.com/(?:[^/]+/)*([A-Z0-9]+)-([A-Z0-9]+)-(\w+)$")


class MalformedPermalinkError(ValueError):
    """Raised when a permalink does not have the shape Slack documents."""

    pass


def make_permalink(
    team_domain: str,
    channel_id: str,
    ts: str,
    thread_ts: Optional[str] = None,
) -> str:
    """Deep link to a message, e.g. https://team.slack.com/archives/C1/p1234567890123456"""
    url = f"https://{team_domain}.slack.com/archives/{channel_id}/p{ts.replace('.', '')}"
    if thread_ts:
        url = f"{url}?thread_ts={thread_ts.replace('.', '')}"
    return url


def public_file_url(url_private: str, permalink_public: str) -> str:
    """
    Direct download URL of a publicly shared file.

    The pub_secret is the last dash-separated part of the public permalink;
    appending it to the private URL makes the file downloadable without a token.

    Args:
        url_private: The file's url_private
        permalink_public: The file's permalink_public

    Returns:
        Downloadable URL

    Raises:
        MalformedPermalinkError: If the public permalink cannot be parsed
    """
    match = PUBLIC_FILE_PATTERN.match(permalink_public)
    if not match:
        raise MalformedPermalinkError(f"Invalid Slack public file permalink: {permalink_public}")

    pub_secret = match.group(3)
    return f"{url_private}?pub_secret={pub_secret}"
