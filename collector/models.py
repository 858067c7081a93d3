# collector/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

SHORT_ID_LEN = 12


def short_id(container_id: str) -> str:
    return container_id[:SHORT_ID_LEN]


@dataclass(frozen=True)
class ContainerRef:
    id: str
    display_name: str


@dataclass(frozen=True)
class NetworkCounters:
    rx_bytes: int = 0
    tx_bytes: int = 0


class BlockIoOp(str, Enum):
    READ = "Read"
    WRITE = "Write"
    OTHER = "Other"

    @classmethod
    def parse(cls, raw) -> "BlockIoOp":
        # cgroup v1 reports "Read"/"Write", cgroup v2 reports "read"/"write"
        value = str(raw or "").lower()
        if value == "read":
            return cls.READ
        if value == "write":
            return cls.WRITE
        return cls.OTHER


@dataclass(frozen=True)
class BlockIoEntry:
    op: BlockIoOp
    bytes: int = 0


@dataclass(frozen=True)
class RawStatsSnapshot:
    """One stats read; carries the engine's current and previous CPU sample."""

    cpu_usage_total: int = 0
    system_cpu_usage: int = 0
    online_cpu_count: int = 0
    previous_cpu_usage_total: int = 0
    previous_system_cpu_usage: int = 0
    memory_usage: int = 0
    memory_limit: int = 0
    network_interfaces: Tuple[NetworkCounters, ...] = field(default_factory=tuple)
    block_io_ops: Tuple[BlockIoEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ContainerMetrics:
    id: str
    name: str
    cpu_percent: float
    memory_usage: int
    memory_limit: int
    memory_percent: float
    network_rx: int
    network_tx: int
    block_read: int
    block_write: int
