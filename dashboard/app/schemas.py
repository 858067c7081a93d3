# dashboard/app/schemas.py
from dataclasses import asdict

from pydantic import BaseModel, Field

from collector.models import ContainerMetrics


class ContainerStatsOut(BaseModel):
    id: str
    name: str
    cpu_percent: float = Field(ge=0)
    memory_usage: int
    memory_limit: int
    memory_percent: float = Field(ge=0)
    network_rx: int
    network_tx: int
    block_read: int
    block_write: int

    @classmethod
    def from_metrics(cls, metrics: ContainerMetrics) -> "ContainerStatsOut":
        return cls(**asdict(metrics))
