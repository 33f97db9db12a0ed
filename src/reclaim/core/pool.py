"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/pool.py
Bounded worker pool for the hashing stages.

Jobs run on a ThreadPoolExecutor, but at most `max_in_flight` are submitted
at a time: the producer waits for a completion before submitting more, so
work is never buffered without bound. Results are handed back to the single
consuming thread, which is the only place results are merged.
"""

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Iterator, Optional, Set, TypeVar

from reclaim.core.interfaces import StoppedFlag
from reclaim.core.models import EngineConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class WorkResult(Generic[T, R]):
    """Outcome of one job: either `value` or an OSError in `error`."""
    item: T
    value: Optional[R] = None
    error: Optional[OSError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BoundedWorkerPool:
    """
    Runs a function over items with a fixed number of threads and a bounded
    submission window. Only OSError is captured per item; any other
    exception is a bug and propagates to the consumer.
    """

    def __init__(self, workers: int, max_in_flight: Optional[int] = None, name: str = "reclaim"):
        if workers < 1:
            raise ValueError("Worker count must be at least 1")
        self.workers = workers
        self.max_in_flight = max_in_flight or workers * EngineConfig.IN_FLIGHT_PER_WORKER
        self.name = name

    def map_unordered(
        self,
        func: Callable[[T], R],
        items: Iterable[T],
        stopped_flag: Optional[StoppedFlag] = None,
    ) -> Iterator[WorkResult]:
        """
        Yield a WorkResult per item in completion order.
        When `stopped_flag()` turns True no new work is submitted, queued
        jobs are cancelled and in-flight jobs finish unobserved.
        """
        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix=self.name) as executor:
            pending: Set[Future] = set()
            try:
                for item in items:
                    if stopped_flag and stopped_flag():
                        return
                    pending.add(executor.submit(self._run, func, item))
                    if len(pending) >= self.max_in_flight:
                        done, pending = wait(pending, return_when=FIRST_COMPLETED)
                        for future in done:
                            yield future.result()

                while pending:
                    if stopped_flag and stopped_flag():
                        return
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    for future in done:
                        yield future.result()
            finally:
                for future in pending:
                    future.cancel()

    @staticmethod
    def _run(func: Callable[[T], R], item: T) -> WorkResult:
        try:
            return WorkResult(item=item, value=func(item))
        except OSError as e:
            return WorkResult(item=item, error=e)
