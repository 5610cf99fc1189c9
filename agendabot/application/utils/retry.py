from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry a collaborator call with exponential backoff.

    ``max_attempts=1`` means a single call and no retry. Only exceptions that are
    instances of ``retry_on`` are retried; anything else propagates immediately.
    """

    max_attempts: int = 1
    backoff_seconds: float = 0.5
    retry_on: tuple[type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        attempts = max(1, self.max_attempts)
        delay = self.backoff_seconds
        attempt = 0
        while True:
            attempt += 1
            try:
                return fn(*args, **kwargs)
            except self.retry_on as e:
                if attempt >= attempts:
                    raise
                logger.warning(
                    "Retrying collaborator call",
                    extra={"attempt": attempt, "max_attempts": attempts, "error": str(e)},
                )
                if delay > 0:
                    self.sleep(delay)
                delay *= 2


NO_RETRY = RetryPolicy()
