"""
Bounded-concurrency batch runner with per-entity retry.

At most ``max_concurrency`` entities are in flight; the next queued entity
starts as soon as one finishes. Each entity keeps its slot for all of its
attempts, so retries never push the number of busy entities past the cap.
One entity failing, even after every retry, never stops the others.

There is no mid-batch cancellation.
"""
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from app.core.logging import logger

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class EntityOutcome(Generic[R]):
    key: str
    success: bool
    attempts: int
    result: Optional[R] = None
    error: Optional[str] = None


@dataclass
class BatchResult(Generic[R]):
    total: int
    completed: int
    outcomes: List[EntityOutcome]

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)


async def run_with_retry(
    operation: Callable[[], Awaitable[R]],
    key: str,
    max_attempts: int = 3,
    retry_delay: float = 1.5,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> EntityOutcome:
    """
    Run ``operation`` until it succeeds or ``max_attempts`` is reached.

    Waits ``attempt * retry_delay`` seconds between attempts. Errors are
    recorded on the outcome, never raised.
    """
    last_error = None
    for attempt in range(1, max_attempts + 1):
        try:
            result = await operation()
            return EntityOutcome(key=key, success=True, attempts=attempt, result=result)
        except Exception as e:
            last_error = e
            if attempt < max_attempts:
                wait_time = attempt * retry_delay
                logger.warning(f"{key}: attempt {attempt}/{max_attempts} failed ({str(e)}), retrying in {wait_time}s")
                await sleep(wait_time)

    logger.error(f"{key}: all {max_attempts} attempts failed. Last error: {str(last_error)}")
    return EntityOutcome(key=key, success=False, attempts=max_attempts, error=str(last_error))


async def run_batch(
    entities: Sequence[T],
    operation: Callable[[T], Awaitable[R]],
    key: Callable[[T], str],
    set_busy: Callable[[T, bool], None] = None,
    on_progress: Callable[[int, int], None] = None,
    max_concurrency: int = 2,
    max_attempts: int = 3,
    retry_delay: float = 1.5,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> BatchResult:
    """
    Apply ``operation`` to every entity under a concurrency cap.

    Args:
        entities: Entities in queue order
        operation: Single-entity job; raising marks an attempt as failed
        key: Label for an entity (logs and outcomes)
        set_busy: Called with True before the first attempt, False after the last
        on_progress: Called with (completed, total) after each entity finishes
        max_concurrency: Entities allowed in flight at once
        max_attempts: Attempts per entity
        retry_delay: Base delay for the linear backoff
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        BatchResult with one outcome per entity, in input order
    """
    if max_concurrency < 1:
        raise ValueError("max_concurrency must be at least 1")
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    total = len(entities)
    semaphore = asyncio.Semaphore(max_concurrency)
    completed = 0

    async def worker(entity: T) -> EntityOutcome:
        nonlocal completed
        label = key(entity)
        async with semaphore:
            if set_busy:
                set_busy(entity, True)
            try:
                outcome = await run_with_retry(
                    lambda: operation(entity),
                    label,
                    max_attempts=max_attempts,
                    retry_delay=retry_delay,
                    sleep=sleep,
                )
            finally:
                if set_busy:
                    set_busy(entity, False)

        completed += 1
        logger.info(f"Batch progress: {completed}/{total} ({label} {'ok' if outcome.success else 'failed'})")
        if on_progress:
            try:
                on_progress(completed, total)
            except Exception as e:
                logger.warning(f"Progress callback failed: {str(e)}")
        return outcome

    logger.info(f"Starting batch of {total} (concurrency {max_concurrency}, {max_attempts} attempts each)")
    outcomes = await asyncio.gather(*(worker(e) for e in entities))
    result = BatchResult(total=total, completed=completed, outcomes=list(outcomes))
    logger.info(f"Batch finished: {result.succeeded} succeeded, {result.failed} failed")
    return result
