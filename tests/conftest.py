"""
Shared fixtures.
"""

from unittest.mock import AsyncMock

import pytest

CHANNEL_NAMES = {"C2": "random", "C3": "no-alias"}


@pytest.fixture
def channel_names():
    """Channel name lookup answering from CHANNEL_NAMES, else the channel id."""
    lookup = AsyncMock()
    lookup.get_channel_name.side_effect = lambda channel_id: CHANNEL_NAMES.get(channel_id, channel_id)
    return lookup
