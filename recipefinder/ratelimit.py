"""
In-memory token bucket rate limiter keyed by client IP.

Used by POST /api/rawSearch. Each client gets a bucket of max_tokens tokens;
one token is consumed per request and tokens_per_refill tokens come back every
refill_seconds. State lives in the process only: it resets on restart and is
not shared between instances, which is fine for a single-instance deployment.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 10
DEFAULT_REFILL_SECONDS = 6.0
DEFAULT_TOKENS_PER_REFILL = 1


@dataclass
class Bucket:
    tokens: int
    last_refill: float


class TokenBucketLimiter:
    """
    Token bucket per key.

    A new key starts with a full bucket. Refills happen lazily when the bucket
    is read: if more than refill_seconds passed since the last refill, the
    whole number of elapsed intervals is added (capped at max_tokens) and the
    refill time moves to now. Buckets that have refilled to full are dropped,
    so idle clients do not accumulate.
    """

    def __init__(
        self,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        refill_seconds: float = DEFAULT_REFILL_SECONDS,
        tokens_per_refill: int = DEFAULT_TOKENS_PER_REFILL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")
        if refill_seconds <= 0:
            raise ValueError("refill_seconds must be positive")

        self.max_tokens = max_tokens
        self.refill_seconds = refill_seconds
        self.tokens_per_refill = tokens_per_refill
        self._clock = clock
        self._buckets: Dict[str, Bucket] = {}
        self._last_prune = float("-inf")

    @property
    def retry_after_seconds(self) -> int:
        """Value for the Retry-After header when a request is rejected."""
        return math.ceil(self.refill_seconds)

    def get_tokens(self, key: str) -> int:
        """Current token count for key, after applying any pending refill."""
        now = self._clock()
        self._prune(now)
        bucket = self._buckets.get(key)

        if bucket is None:
            self._buckets[key] = Bucket(tokens=self.max_tokens, last_refill=now)
            return self.max_tokens

        elapsed = now - bucket.last_refill
        if elapsed > self.refill_seconds:
            refills = int(elapsed // self.refill_seconds)
            bucket.tokens = min(self.max_tokens, bucket.tokens + refills * self.tokens_per_refill)
            bucket.last_refill = now

        return bucket.tokens

    def consume(self, key: str) -> bool:
        """
        Take one token for key.

        Returns:
            True if the request may proceed, False if the bucket is empty
        """
        if self.get_tokens(key) <= 0:
            logger.info("Rate limit exceeded for %s", key)
            return False

        self._buckets[key].tokens -= 1
        return True

    def _prune(self, now: float) -> None:
        """
        Drop buckets that would have refilled to full by now.

        A missing key reads as a full bucket, so this changes no answer. Runs
        at most once per refill interval.
        """
        if now - self._last_prune < self.refill_seconds:
            return
        self._last_prune = now

        for key, bucket in list(self._buckets.items()):
            elapsed = now - bucket.last_refill
            refills = int(elapsed // self.refill_seconds) if elapsed > self.refill_seconds else 0
            if bucket.tokens + refills * self.tokens_per_refill >= self.max_tokens:
                del self._buckets[key]

    def reset(self) -> None:
        """Forget all buckets (useful for testing)."""
        self._buckets.clear()

    def __len__(self) -> int:
        return len(self._buckets)
