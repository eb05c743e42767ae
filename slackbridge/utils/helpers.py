"""
Shared Utility Functions

Common helper functions used across multiple modules.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_with_fallback(
    awaitable: Awaitable[T],
    fallback: Optional[T],
    timeout: Optional[float],
    description: str,
) -> Optional[T]:
    """
    Await an external lookup under a deadline.

    A timeout or any exception from the lookup resolves to ``fallback``
    instead of propagating, so callers can continue with their degraded path.

    Args:
        awaitable: The lookup to await
        fallback: Value returned on timeout or failure
        timeout: Deadline in seconds, None for no deadline
        description: What is being looked up, for the log

    Returns:
        The lookup result, or ``fallback``
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Timed out after {timeout}s during {description}")
    except Exception as e:
        logger.error(f"Error during {description}: {e}")
    return fallback
