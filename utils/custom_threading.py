"""
Script contains functions for threading
"""

from __future__ import annotations

from concurrent import futures
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Sequence, Tuple, TypeVar

from configs.constants import Constants
from utils.logger import logger

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class PoolResult(Generic[T, R]):
    """Outcome of one pool run.

    ``succeeded`` holds ``(item, value)`` pairs in completion order, so callers
    must key results by item rather than by position.
    """

    succeeded: List[Tuple[T, R]] = field(default_factory=list)
    failed: int = 0

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + self.failed


class ThreadExecutor:
    """
    Bounded-width thread pool that tolerates individual task failures.

    Items are queued FIFO and at most ``width`` run at once.  A worker that
    raises is logged and counted; siblings keep running and the remaining
    queue is still drained.  Every item is attempted exactly once.
    """

    def __init__(self, progress_every: int = Constants.PROGRESS_EVERY) -> None:
        self.progress_every = progress_every

    def run(
        self,
        tasks: Sequence[T],
        width: int,
        worker: Callable[[T], R],
    ) -> PoolResult[T, R]:
        if width < 1:
            raise ValueError(f"pool width must be >= 1, got {width}")

        result: PoolResult[T, R] = PoolResult()
        if not tasks:
            return result

        max_workers = min(width, len(tasks))
        logger.info(f"ThreadExecutor: {len(tasks)} tasks on {max_workers} workers")

        with futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            pending = {executor.submit(worker, item): item for item in tasks}
            for done, future in enumerate(futures.as_completed(pending), 1):
                item = pending[future]
                try:
                    value = future.result()
                except Exception as exc:  # pylint: disable=broad-except
                    result.failed += 1
                    logger.warning(f"ThreadExecutor: task {item!r} failed: {exc}")
                else:
                    result.succeeded.append((item, value))

                if self.progress_every and done % self.progress_every == 0:
                    self._log_progress(done, len(tasks), result)

        logger.info(
            f"ThreadExecutor: done | ok={len(result.succeeded)} | failed={result.failed}"
        )
        return result

    @staticmethod
    def _log_progress(done: int, total: int, result: PoolResult[Any, Any]) -> None:
        logger.info(
            f"ThreadExecutor: processed {done}/{total} | "
            f"ok={len(result.succeeded)} | failed={result.failed}"
        )
