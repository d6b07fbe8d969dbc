"""Retry policy for outbound provider calls.

Backoff before retry ``n`` (0-based) is ``min(base_delay * multiplier**n, max_delay)``.
Only network failures, 5xx and 429 responses are retried.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from .errors import CaseLawError


class RetryPolicy(BaseModel):
    """Retry settings shared by every transport client"""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0)
    base_delay: float = Field(default=1.0, ge=0)
    max_delay: float = Field(default=5.0, ge=0)
    multiplier: float = Field(default=2.0, ge=1)

    @staticmethod
    def should_retry(error: BaseException) -> bool:
        return isinstance(error, CaseLawError) and error.retryable

    def retrying(
        self,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        before_sleep: Optional[Callable[[RetryCallState], Any]] = None,
    ) -> AsyncRetrying:
        """Build a tenacity controller; the last error is re-raised unchanged"""
        return AsyncRetrying(
            sleep=sleep,
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.base_delay,
                exp_base=self.multiplier,
                max=self.max_delay,
            ),
            retry=retry_if_exception(self.should_retry),
            before_sleep=before_sleep,
            reraise=True,
        )
