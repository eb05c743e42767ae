# Slack integration module
from slackbridge.integrations.slack.client import SlackClient
from slackbridge.integrations.slack.files import FileDownloadError, SlackFileClient
from slackbridge.integrations.slack.permalink import (
    MalformedPermalinkError,
    make_permalink,
    public_file_url,
)

__all__ = [
    "SlackClient",
    "SlackFileClient",
    "FileDownloadError",
    "MalformedPermalinkError",
    "make_permalink",
    "public_file_url",
]
