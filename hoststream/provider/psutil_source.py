from __future__ import annotations

import logging

import psutil

from hoststream.models.metrics import DiskReading, MemoryReading
from hoststream.provider.base import HostMetricsSource

logger = logging.getLogger(__name__)


class PsutilSource(HostMetricsSource):
    """HostMetricsSource backed by psutil.

    CPU usage is measured between consecutive ``refresh_cpu()`` calls, so the
    constructor primes psutil's per-core counters once.
    """

    name = "psutil"

    def __init__(self, all_partitions: bool = False) -> None:
        self.all_partitions = all_partitions
        self._cpu: list[float] = []
        self._ram = MemoryReading()
        self._swap = MemoryReading()
        self._disks: list[DiskReading] = []
        psutil.cpu_percent(interval=None, percpu=True)

    def refresh_cpu(self) -> None:
        self._cpu = [float(p) for p in psutil.cpu_percent(interval=None, percpu=True)]

    def refresh_memory(self) -> None:
        vm = psutil.virtual_memory()
        sw = psutil.swap_memory()
        self._ram = MemoryReading(total=float(vm.total), used=float(vm.used), free=float(vm.free))
        self._swap = MemoryReading(total=float(sw.total), used=float(sw.used), free=float(sw.free))

    def refresh_disks(self) -> None:
        disks: list[DiskReading] = []
        for part in psutil.disk_partitions(all=self.all_partitions):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                # e.g. an empty optical drive or a mount we may not stat
                logger.debug("Skipping unreadable mount %s", part.mountpoint)
                continue
            disks.append(DiskReading(total=float(usage.total), available=float(usage.free)))
        self._disks = disks

    def cpu_usages(self) -> list[float]:
        return list(self._cpu)

    def memory(self) -> MemoryReading:
        return self._ram.model_copy()

    def swap(self) -> MemoryReading:
        return self._swap.model_copy()

    def disks(self) -> list[DiskReading]:
        return list(self._disks)
