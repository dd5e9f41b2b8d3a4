from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

CpuReading = dict[int, float]


class MemoryReading(BaseModel):
    """Total/used/free bytes for RAM or swap, as reported by the source."""

    total: float = Field(default=0.0, ge=0)
    used: float = Field(default=0.0, ge=0)
    free: float = Field(default=0.0, ge=0)


class DiskReading(BaseModel):
    """Capacity of the reported disk. ``used`` is always derived."""

    total: float = Field(default=0.0, ge=0)
    available: float = Field(default=0.0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def used(self) -> float:
        return self.total - self.available


class MetricsReading(BaseModel):
    """One tick's worth of host metrics."""

    cpu: CpuReading = Field(default_factory=dict)
    ram: MemoryReading = Field(default_factory=MemoryReading)
    swap: MemoryReading = Field(default_factory=MemoryReading)
    disk: DiskReading | None = None
