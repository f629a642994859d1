# lastgreen/ci/ci_retry.py
"""
Failure policies for GitHub calls.

Two independent primitives:
  - call_with_retry: bounded attempts with linear backoff, last error re-raised
  - attempt_or_skip: single attempt, failure logged and turned into None
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

import requests

from config import RETRY_DELAY_SECONDS
from lastgreen.github.github_client import GitHubAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECOVERABLE: Tuple[Type[BaseException], ...] = (GitHubAPIError, requests.RequestException)


def backoff_delay(attempt: int, unit: float = RETRY_DELAY_SECONDS) -> float:
    """Delay after failed attempt `attempt` (1-based)."""
    return attempt * unit


def call_with_retry(
    fn: Callable[[], T],
    *,
    attempts: int,
    description: str,
    sleep: Callable[[float], None] = time.sleep,
    delay_unit: float = RETRY_DELAY_SECONDS,
) -> T:
    attempts = max(1, int(attempts))
    last_error: Optional[BaseException] = None

    for attempt in range(1, attempts + 1):
        try:
            logger.debug(f"  Attempt {attempt}: {description}...")
            return fn()
        except RECOVERABLE as e:
            last_error = e
            logger.debug(f"  ⚠️  {description} failed (attempt {attempt}/{attempts}): {e}")
            if attempt < attempts:
                sleep(backoff_delay(attempt, delay_unit))

    raise last_error


def attempt_or_skip(fn: Callable[[], T], *, description: str) -> Optional[T]:
    try:
        return fn()
    except RECOVERABLE as e:
        logger.warning(f"    ⚠️  {description} failed: {e}")
        return None
