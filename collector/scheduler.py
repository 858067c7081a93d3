# collector/scheduler.py
"""Timer-driven refresh loop for the terminal view."""
import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional, Sequence

from .errors import EngineUnreachableError
from .models import ContainerMetrics

logger = logging.getLogger(__name__)

# longest stretch a signal-requested stop can go unnoticed
SIGNAL_POLL_SECONDS = 0.2


class RefreshState(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    DELIVERED = "delivered"
    STOPPED = "stopped"


class TerminalRefresher:
    """One collect+render cycle at a time, every ``interval`` seconds, until stopped.

    The first cycle runs immediately. ``stop()`` is for other threads;
    ``handle_signal`` is the signal handler and only flips a flag, since the
    handler runs on the thread that may be inside ``Event.wait``.
    """

    def __init__(
        self,
        collector,
        render: Callable[[Sequence[ContainerMetrics]], None],
        interval: float = 2.0,
        stop_event: Optional[threading.Event] = None,
    ):
        self.collector = collector
        self.render = render
        self.interval = interval
        self.state = RefreshState.IDLE
        self.cycles = 0
        self.failures = 0
        self._stop = stop_event or threading.Event()
        self._signalled = False

    @property
    def stopped(self) -> bool:
        return self._signalled or self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def handle_signal(self, signum, frame) -> None:
        self._signalled = True

    def run_once(self) -> bool:
        """Run a single cycle. Returns False when the cycle was skipped."""
        self.state = RefreshState.COLLECTING
        self.cycles += 1
        try:
            stats = self.collector.collect()
        except EngineUnreachableError as exc:
            self.failures += 1
            logger.error("Error getting container stats: %s", exc.message)
            self.state = RefreshState.IDLE
            return False
        self.render(stats)
        self.state = RefreshState.DELIVERED
        return True

    def _sleep(self) -> None:
        deadline = time.monotonic() + self.interval
        while not self.stopped:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            self._stop.wait(min(remaining, SIGNAL_POLL_SECONDS))

    def run(self) -> None:
        try:
            while not self.stopped:
                self.run_once()
                if self.state is RefreshState.DELIVERED:
                    self.state = RefreshState.IDLE
                self._sleep()
        finally:
            self.state = RefreshState.STOPPED
