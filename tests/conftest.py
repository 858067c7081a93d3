"""Shared fixtures: an in-memory stand-in for the Docker engine."""

import sys
import threading
import time
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from collector.errors import EngineUnreachableError, PerContainerSampleError
from collector.models import BlockIoEntry, BlockIoOp, ContainerRef, NetworkCounters, RawStatsSnapshot


def make_snapshot(**overrides) -> RawStatsSnapshot:
    values = dict(
        cpu_usage_total=200,
        previous_cpu_usage_total=100,
        system_cpu_usage=1200,
        previous_system_cpu_usage=1000,
        online_cpu_count=4,
        memory_usage=104857600,
        memory_limit=2147483648,
        network_interfaces=(NetworkCounters(rx_bytes=1000, tx_bytes=500),),
        block_io_ops=(BlockIoEntry(BlockIoOp.READ, 4096), BlockIoEntry(BlockIoOp.WRITE, 8192)),
    )
    values.update(overrides)
    return RawStatsSnapshot(**values)


class FakeSource:
    """Mimics DockerStatsSource without a daemon."""

    def __init__(self, refs=(), snapshots=None, failures=None, list_error=None, delays=None):
        self.refs = list(refs)
        self.snapshots = snapshots or {}
        self.failures = failures or {}
        self.list_error = list_error
        self.delays = delays or {}
        self.list_calls = 0
        self.closed = 0
        self._lock = threading.Lock()

    def list_running_containers(self):
        with self._lock:
            self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.refs)

    def stream_raw_stats(self, container_id):
        delay = self.delays.get(container_id)
        if delay:
            time.sleep(delay)
        if container_id in self.failures:
            raise self.failures[container_id]
        return self.snapshots.get(container_id, make_snapshot())

    def close(self):
        self.closed += 1


def container_id(n: int) -> str:
    return f"{n:x}".rjust(64, "a")


@pytest.fixture
def three_refs():
    return [
        ContainerRef(id=container_id(1), display_name="web"),
        ContainerRef(id=container_id(2), display_name="db"),
        ContainerRef(id=container_id(3), display_name="cache"),
    ]


@pytest.fixture
def fake_source(three_refs):
    return FakeSource(refs=three_refs)


@pytest.fixture
def unreachable_source():
    return FakeSource(list_error=EngineUnreachableError("failed to list containers: connection refused"))


@pytest.fixture
def partly_failing_source(three_refs):
    bad = three_refs[1].id
    return FakeSource(refs=three_refs, failures={bad: PerContainerSampleError(bad, "No such container")})
