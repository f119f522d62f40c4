"""
Index Builder - Run application index builds off the UI thread.

Every build request takes the next value of a monotonic generation counter
and stamps it on the resulting snapshot. Consumers compare generations to
drop a slow build that finishes after a newer one.
"""

import itertools
import threading
import time
from typing import Callable, Iterable, Optional

from loguru import logger

from .app_index import BUNDLE_SUFFIX, ApplicationIndex, build_index, default_directories


class IndexBuilder:
    """
    Builds ApplicationIndex snapshots synchronously or on worker threads.

    Methods:
        build_now(): Build and return a snapshot on the calling thread
        request_build(on_done): Build on a daemon thread, then call on_done(index)
        is_stale(index): Whether an index should be rebuilt before showing
    """

    def __init__(
        self,
        directories: Optional[Iterable[str]] = None,
        suffix: str = BUNDLE_SUFFIX,
        max_age_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.directories = list(directories) if directories else default_directories()
        self.suffix = suffix
        self.max_age_seconds = max_age_seconds
        self._clock = clock

        self._counter = itertools.count(1)
        self._counter_lock = threading.Lock()

    def _next_generation(self) -> int:
        with self._counter_lock:
            return next(self._counter)

    def build_now(self) -> ApplicationIndex:
        """Build an index on the calling thread."""
        return build_index(
            self.directories, self.suffix, self._next_generation(), clock=self._clock,
        )

    def request_build(self, on_done: Callable[[ApplicationIndex], None]) -> threading.Thread:
        """
        Start a background build.

        Args:
            on_done: Called from the worker thread with the finished index.
                     Callers must marshal it onto their own context.

        Returns:
            The started worker thread
        """
        generation = self._next_generation()

        def _worker():
            try:
                index = build_index(self.directories, self.suffix, generation, clock=self._clock)
            except Exception:
                logger.exception(f"Index build {generation} failed")
                return
            on_done(index)

        thread = threading.Thread(
            target=_worker,
            name=f"quicklaunch-index-{generation}",
            daemon=True,
        )
        thread.start()
        logger.debug(f"Started index build {generation}")
        return thread

    def is_stale(self, index: Optional[ApplicationIndex]) -> bool:
        """
        Check whether an index needs rebuilding.

        Generation 0 means the index was never built. A max age of 0
        forces a rebuild on every check.
        """
        if index is None or index.generation == 0:
            return True
        return self._clock() - index.built_at >= self.max_age_seconds
