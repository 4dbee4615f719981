"""
Optimistic-concurrency retry

Read the latest resource version, reapply the same declarative action batch,
give up after a bounded number of attempts.
"""

import logging
from typing import Any, Awaitable, Callable

from .exceptions import ApiError, CartUpdateExhaustedError

logger = logging.getLogger(__name__)


async def with_version_retry(
    snapshot: dict[str, Any],
    fetch_latest: Callable[[], Awaitable[dict[str, Any]]],
    apply_actions: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
    max_retries: int = 2,
) -> dict[str, Any]:
    """
    Apply an update to a versioned resource, retrying on version conflicts.

    Args:
        snapshot: Resource representation carrying `id` and `version`
        fetch_latest: Coroutine factory returning the current representation
        apply_actions: Submits the update against the given representation
        max_retries: Extra attempts after the first conflict

    Returns:
        The resource as returned by the successful update

    Raises:
        CartUpdateExhaustedError: every attempt hit a version conflict
        ApiError: the platform rejected the update for another reason
    """
    current = snapshot
    attempts = max(max_retries, 0) + 1

    for attempt in range(1, attempts + 1):
        try:
            return await apply_actions(current)
        except ApiError as e:
            if not e.is_conflict:
                raise
            if attempt == attempts:
                raise CartUpdateExhaustedError(current.get("id", ""), attempts) from e
            logger.warning(
                f"Version conflict on {current.get('id')} at version "
                f"{current.get('version')}, refetching (attempt {attempt}/{attempts})"
            )
            current = await fetch_latest()
