"""Retry policy for blocking delivery calls (webhook POSTs)."""
import asyncio
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from logging import Logger


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How often to attempt a delivery and how long to wait in between.

    The wait before attempt ``n + 1`` is ``initial_backoff_sec * 2 ** (n - 1)``.
    Only ``retry_on`` exceptions are retried; anything else ends the
    delivery at once.
    """

    attempts: int = 3
    initial_backoff_sec: float = 2.0
    retry_on: tuple[type[Exception], ...] = (OSError,)

    def backoffs(self) -> Iterator[float]:
        """Delays to sleep between consecutive attempts."""
        for n in range(self.attempts - 1):
            yield self.initial_backoff_sec * 2**n


async def with_retry(
    fn: Callable[[], None],
    policy: RetryPolicy,
    *,
    name: str,
    logger: Logger,
) -> bool:
    """Run ``fn`` in a worker thread until it succeeds or the policy gives up.

    Returns:
        True if an attempt completed without raising, False otherwise.
    """
    backoffs = policy.backoffs()
    attempt = 0
    while True:
        attempt += 1
        try:
            await asyncio.to_thread(fn)
            return True
        except policy.retry_on as e:
            delay = next(backoffs, None)
            if delay is None:
                logger.error(
                    "%s failed after %d attempts. Last error: %s",
                    name,
                    attempt,
                    e,
                )
                return False
            logger.warning(
                "%s attempt %d/%d failed: %s. Retrying in %.0fs...",
                name,
                attempt,
                policy.attempts,
                e,
                delay,
            )
            await asyncio.sleep(delay)
        except Exception as e:
            logger.error("%s failed (non-retryable): %s", name, e)
            return False
