"""
Reliability helpers for nftgate.

Outbound calls get an explicit deadline; there is no retry or backoff.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

import structlog

from nftgate.core.exceptions import TimeoutError as NFTGateTimeoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def run_with_timeout(
    awaitable: Awaitable[T], timeout_seconds: Optional[float], operation: str
) -> T:
    """
    Await ``awaitable`` for at most ``timeout_seconds``.

    ``None`` disables the deadline.

    Raises:
        TimeoutError: The deadline passed before the awaitable finished
    """
    if timeout_seconds is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        logger.error("Operation timed out", operation=operation, timeout_seconds=timeout_seconds)
        raise NFTGateTimeoutError(
            f"{operation} timed out after {timeout_seconds} seconds",
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        ) from exc

