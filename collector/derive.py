# collector/derive.py
"""Turn raw cumulative counters into per-container metrics.

Everything here is pure: same snapshot in, same ContainerMetrics out.
"""
from typing import Iterable, Optional, Tuple

from .models import BlockIoEntry, BlockIoOp, ContainerMetrics, NetworkCounters, RawStatsSnapshot, short_id


def calculate_cpu_percent(snap: RawStatsSnapshot) -> float:
    cpu_delta = float(snap.cpu_usage_total) - float(snap.previous_cpu_usage_total)
    system_delta = float(snap.system_cpu_usage) - float(snap.previous_system_cpu_usage)
    if system_delta > 0.0 and cpu_delta > 0.0:
        return (cpu_delta / system_delta) * max(snap.online_cpu_count, 0) * 100.0
    return 0.0


def calculate_memory_percent(usage: int, limit: int) -> float:
    # limit 0 means unbounded
    if limit > 0:
        return max(usage, 0) / limit * 100.0
    return 0.0


def sum_network(interfaces: Iterable[NetworkCounters]) -> Tuple[int, int]:
    rx = tx = 0
    for iface in interfaces:
        rx += max(iface.rx_bytes, 0)
        tx += max(iface.tx_bytes, 0)
    return rx, tx


def sum_block_io(entries: Iterable[BlockIoEntry]) -> Tuple[int, int]:
    read = write = 0
    for entry in entries:
        if entry.op is BlockIoOp.READ:
            read += max(entry.bytes, 0)
        elif entry.op is BlockIoOp.WRITE:
            write += max(entry.bytes, 0)
    return read, write


def derive_metrics(container_id: str, name: Optional[str], snap: RawStatsSnapshot) -> ContainerMetrics:
    display_id = short_id(container_id)
    rx, tx = sum_network(snap.network_interfaces)
    read, write = sum_block_io(snap.block_io_ops)
    usage = max(snap.memory_usage, 0)
    limit = max(snap.memory_limit, 0)
    return ContainerMetrics(
        id=display_id,
        name=name or display_id,
        cpu_percent=calculate_cpu_percent(snap),
        memory_usage=usage,
        memory_limit=limit,
        memory_percent=calculate_memory_percent(usage, limit),
        network_rx=rx,
        network_tx=tx,
        block_read=read,
        block_write=write,
    )
