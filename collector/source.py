# collector/source.py
"""Docker Engine access: list running containers and read one stats sample each.

Container names are reported without the leading ``/`` the engine prefixes
them with ("web", not "/web"), the same form ``docker ps`` and the SDK's
``Container.name`` use.
"""
import math
import threading
from typing import Any, List, Optional

import docker
import docker.errors
import psutil
import requests

from .errors import EngineUnreachableError, PerContainerSampleError, StartupError
from .models import BlockIoEntry, BlockIoOp, ContainerRef, NetworkCounters, RawStatsSnapshot, short_id


# transport-level failures the SDK lets through unwrapped
_ENGINE_ERRORS = (docker.errors.DockerException, requests.exceptions.RequestException)
_SAMPLE_ERRORS = (ValueError,) + _ENGINE_ERRORS


class DockerStatsSource:
    """Read-only view of the engine, shared by the terminal loop and API handlers.

    The underlying ``requests`` session is pooled and may be used from several
    threads at once; nothing here writes container state.
    """

    def __init__(self, client, timeout: Optional[float] = None):
        self._client = client
        self._timeout = timeout
        self._closed = False
        self._close_lock = threading.Lock()

    @classmethod
    def from_env(cls, timeout: float = 5.0, max_pool_size: int = 10) -> "DockerStatsSource":
        try:
            client = docker.from_env(timeout=int(max(timeout, 1)), max_pool_size=max_pool_size)
        except _ENGINE_ERRORS as exc:
            raise StartupError(f"failed to create Docker client: {exc}") from exc
        return cls(client, timeout=timeout)

    def list_running_containers(self) -> List[ContainerRef]:
        try:
            listing = self._client.api.containers()
        except _ENGINE_ERRORS as exc:
            raise EngineUnreachableError(f"failed to list containers: {exc}") from exc

        refs = []
        for entry in listing or []:
            container_id = entry.get("Id") or ""
            names = entry.get("Names") or []
            name = names[0].lstrip("/") if names else ""
            refs.append(ContainerRef(id=container_id, display_name=name or short_id(container_id)))
        return refs

    def stream_raw_stats(self, container_id: str) -> RawStatsSnapshot:
        try:
            data = self._client.api.stats(container_id, stream=False)
        except _SAMPLE_ERRORS as exc:
            raise PerContainerSampleError(container_id, str(exc)) from exc
        return parse_snapshot(container_id, data)

    def close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._client.close()


def _section(data: Any, *path: str) -> dict:
    for key in path:
        data = data.get(key) if isinstance(data, dict) else None
    return data if isinstance(data, dict) else {}


def _counter(section: dict, key: str) -> int:
    value = section.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} is not a number: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{key} is not finite: {value!r}")
    return int(value)


def _online_cpus(cpu_stats: dict) -> int:
    online = _counter(cpu_stats, "online_cpus")
    if online > 0:
        return online
    percpu = _section(cpu_stats, "cpu_usage").get("percpu_usage") or []
    if percpu:
        return len(percpu)
    return psutil.cpu_count(logical=True) or 1


def parse_snapshot(container_id: str, data: Any) -> RawStatsSnapshot:
    """Decode the engine's stats JSON into a RawStatsSnapshot."""
    if not isinstance(data, dict):
        raise PerContainerSampleError(container_id, f"unexpected stats payload: {type(data).__name__}")
    try:
        cpu = _section(data, "cpu_stats")
        precpu = _section(data, "precpu_stats")
        memory = _section(data, "memory_stats")

        networks = []
        for iface in _section(data, "networks").values():
            iface = iface if isinstance(iface, dict) else {}
            networks.append(NetworkCounters(rx_bytes=_counter(iface, "rx_bytes"), tx_bytes=_counter(iface, "tx_bytes")))

        block_io = []
        for entry in _section(data, "blkio_stats").get("io_service_bytes_recursive") or []:
            entry = entry if isinstance(entry, dict) else {}
            block_io.append(BlockIoEntry(op=BlockIoOp.parse(entry.get("op")), bytes=_counter(entry, "value")))

        return RawStatsSnapshot(
            cpu_usage_total=_counter(_section(cpu, "cpu_usage"), "total_usage"),
            system_cpu_usage=_counter(cpu, "system_cpu_usage"),
            online_cpu_count=_online_cpus(cpu),
            previous_cpu_usage_total=_counter(_section(precpu, "cpu_usage"), "total_usage"),
            previous_system_cpu_usage=_counter(precpu, "system_cpu_usage"),
            memory_usage=_counter(memory, "usage"),
            memory_limit=_counter(memory, "limit"),
            network_interfaces=tuple(networks),
            block_io_ops=tuple(block_io),
        )
    except (ValueError, TypeError, OverflowError) as exc:
        raise PerContainerSampleError(container_id, f"malformed stats: {exc}") from exc
