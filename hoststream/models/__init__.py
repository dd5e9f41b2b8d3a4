from .metrics import CpuReading, DiskReading, MemoryReading, MetricsReading

__all__ = [
    "CpuReading",
    "DiskReading",
    "MemoryReading",
    "MetricsReading",
]
