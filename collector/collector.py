# collector/collector.py
import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, NamedTuple, Optional

from .derive import derive_metrics
from .errors import PerContainerSampleError
from .models import ContainerMetrics, ContainerRef, short_id

logger = logging.getLogger(__name__)

# Config from environment or defaults
INTERVAL = int(os.getenv("MONITOR_INTERVAL_SECONDS", "2"))
API_HOST = os.getenv("MONITOR_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("MONITOR_API_PORT", "8080"))
FETCH_TIMEOUT = float(os.getenv("MONITOR_FETCH_TIMEOUT_SECONDS", "5"))
FETCH_WORKERS = int(os.getenv("MONITOR_FETCH_WORKERS", "8"))
CACHE_WINDOW_MS = int(os.getenv("MONITOR_CACHE_WINDOW_MS", "500"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class SampleOutcome(NamedTuple):
    ref: ContainerRef
    metrics: Optional[ContainerMetrics] = None
    error: Optional[PerContainerSampleError] = None


class StatsCollector:
    """Produces one batch of ContainerMetrics per collect() call.

    Holds no state between calls, so the terminal loop and any number of
    HTTP handlers can share a single instance.
    """

    def __init__(self, source, fetch_timeout: float = FETCH_TIMEOUT, max_workers: int = FETCH_WORKERS):
        self.source = source
        self.fetch_timeout = fetch_timeout
        self.max_workers = max(1, max_workers)

    def collect(self) -> List[ContainerMetrics]:
        # EngineUnreachableError from the listing propagates to the caller
        refs = self.source.list_running_containers()
        if not refs:
            return []

        outcomes = self._sample_all(refs)
        batch = []
        for outcome in outcomes:
            if outcome.error is not None:
                logger.warning("failed to get stats for container %s: %s", short_id(outcome.ref.id), outcome.error.message)
                continue
            batch.append(outcome.metrics)
        return batch

    def _sample(self, ref: ContainerRef) -> ContainerMetrics:
        snap = self.source.stream_raw_stats(ref.id)
        return derive_metrics(ref.id, ref.display_name, snap)

    def _sample_all(self, refs: List[ContainerRef]) -> List[SampleOutcome]:
        workers = min(self.max_workers, len(refs))
        # queued fetches only start once a worker frees up
        budget = self.fetch_timeout * math.ceil(len(refs) / workers)

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="stats-fetch")
        try:
            futures = [executor.submit(self._sample, ref) for ref in refs]
            _, pending = wait(futures, timeout=budget)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        outcomes = []
        for ref, future in zip(refs, futures):
            if future in pending:
                err = PerContainerSampleError(ref.id, f"timed out after {self.fetch_timeout:g}s")
                outcomes.append(SampleOutcome(ref, error=err))
                continue
            exc = future.exception()
            if isinstance(exc, PerContainerSampleError):
                outcomes.append(SampleOutcome(ref, error=exc))
            elif exc is not None:
                raise exc
            else:
                outcomes.append(SampleOutcome(ref, metrics=future.result()))
        return outcomes
