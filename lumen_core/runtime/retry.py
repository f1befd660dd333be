"""
Retry policy configuration.

Exponential backoff with jitter for transient HTTP failures. This governs
retries of a single HTTP call; the remote-job poll budget is a separate
concern (see app.jobs.schemas.PollPolicy).
"""

from __future__ import annotations

import random

from pydantic import BaseModel, Field


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    The delay for attempt N is: min(base_delay * (exponential_base ** N), max_delay)
    plus up to 25% jitter.

    Attributes:
        max_attempts: Maximum number of attempts (including initial).
        base_delay: Initial delay in seconds between retries.
        max_delay: Maximum delay in seconds (caps backoff).
        exponential_base: Base for exponential backoff calculation.
        jitter: Whether to add random jitter to delays.
        retry_on_status: HTTP status codes that trigger retry.
    """

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = 0.5
    max_delay: float = 10.0
    exponential_base: float = 2.0
    jitter: bool = True
    retry_on_status: tuple[int, ...] = (429, 502, 503, 504)

    model_config = {"frozen": True}

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number.

        Args:
            attempt: The attempt number (0-indexed).

        Returns:
            Delay in seconds before the next retry.
        """
        delay = self.base_delay * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            delay += delay * 0.25 * random.random()

        return delay

    def max_total_delay(self) -> float:
        """Upper bound of all backoff sleeps across ``max_attempts`` attempts.

        Returns:
            Sum of the capped delays between attempts, with full jitter.
        """
        total = 0.0
        for attempt in range(self.max_attempts - 1):
            delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
            total += delay * 1.25 if self.jitter else delay
        return total

    def should_retry_status(self, status_code: int) -> bool:
        """Check if a status code should trigger a retry."""
        return status_code in self.retry_on_status


DEFAULT_RETRY_POLICY = RetryPolicy()

# Uploads register a job on the remote side and must never be replayed
NO_RETRY_POLICY = RetryPolicy(max_attempts=1, base_delay=0.0, jitter=False)
