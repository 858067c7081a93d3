from .collector import StatsCollector
from .derive import derive_metrics
from .errors import EngineUnreachableError, MonitorError, PerContainerSampleError, StartupError
from .models import BlockIoEntry, BlockIoOp, ContainerMetrics, ContainerRef, NetworkCounters, RawStatsSnapshot

__all__ = [
    "BlockIoEntry",
    "BlockIoOp",
    "ContainerMetrics",
    "ContainerRef",
    "EngineUnreachableError",
    "MonitorError",
    "NetworkCounters",
    "PerContainerSampleError",
    "RawStatsSnapshot",
    "StartupError",
    "StatsCollector",
    "derive_metrics",
]
