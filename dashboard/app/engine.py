# dashboard/app/engine.py
import logging
import threading
import time
from concurrent.futures import Future
from typing import Callable, List, Optional

from collector.collector import CACHE_WINDOW_MS, FETCH_TIMEOUT, FETCH_WORKERS, StatsCollector
from collector.models import ContainerMetrics
from collector.source import DockerStatsSource

logger = logging.getLogger(__name__)


class CoalescingCollector:
    """Shares one collect() result among requests arriving within ``window`` seconds.

    A request that finds a poll in flight waits for it instead of starting
    another. Failed polls are never cached. ``window <= 0`` disables sharing.
    """

    def __init__(self, collector, window: float = 0.5, clock: Callable[[], float] = time.monotonic):
        self.collector = collector
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None
        self._result: Optional[List[ContainerMetrics]] = None
        self._result_at = 0.0

    def collect(self) -> List[ContainerMetrics]:
        if self.window <= 0:
            return self.collector.collect()

        with self._lock:
            if self._result is not None and self._clock() - self._result_at < self.window:
                return list(self._result)
            future = self._inflight
            owner = future is None
            if owner:
                future = self._inflight = Future()

        if not owner:
            return list(future.result())

        try:
            batch = self.collector.collect()
        except BaseException as exc:
            with self._lock:
                self._inflight = None
            future.set_exception(exc)
            raise

        with self._lock:
            self._result = batch
            self._result_at = self._clock()
            self._inflight = None
        future.set_result(batch)
        return list(batch)


_source = None
_collector: Optional[CoalescingCollector] = None
_init_lock = threading.Lock()


def init_engine(source=None) -> CoalescingCollector:
    global _source, _collector
    with _init_lock:
        if _collector is None:
            _source = source or DockerStatsSource.from_env(timeout=FETCH_TIMEOUT, max_pool_size=max(10, FETCH_WORKERS))
            stats = StatsCollector(_source, fetch_timeout=FETCH_TIMEOUT, max_workers=FETCH_WORKERS)
            _collector = CoalescingCollector(stats, window=CACHE_WINDOW_MS / 1000.0)
        return _collector


def close_engine() -> None:
    global _source, _collector
    with _init_lock:
        if _source is not None:
            _source.close()
            logger.info("Docker client closed")
        _source = None
        _collector = None
