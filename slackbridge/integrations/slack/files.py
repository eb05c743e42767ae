"""
Slack File Downloads

Authenticated downloads of url_private file contents.
"""

from typing import Optional

import httpx
import logging

logger = logging.getLogger(__name__)


class FileDownloadError(Exception):
    """Raised when a private file cannot be downloaded."""

    pass


class SlackFileClient:
    """Downloads private Slack files with a bot or user token."""

    def __init__(
        self,
        token: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.timeout = timeout
        self.transport = transport

    async def fetch_text(self, url: str) -> str:
        """
        Download a private file as text.

        Args:
            url: The file's url_private

        Returns:
            Decoded file contents

        Raises:
            FileDownloadError: On network errors, an invalid URL or a non-200 response
        """
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport, follow_redirects=True
            ) as client:
                response = await client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FileDownloadError(f"Failed to download {url}: {e}") from e

        if response.status_code != 200:
            raise FileDownloadError(f"Failed to download {url}: HTTP {response.status_code}")

        logger.debug(f"Downloaded {len(response.content)} bytes from {url}")
        return response.text
