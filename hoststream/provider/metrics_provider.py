from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, TypeVar

from hoststream.errors import ProviderError, ProviderPoisonedError
from hoststream.models.metrics import CpuReading, DiskReading, MemoryReading, MetricsReading
from hoststream.provider.base import HostMetricsSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MetricsProvider:
    """The process-wide, lock-guarded view of host metrics.

    Every public read is one refresh-then-read unit executed under a single
    ``threading.Lock``, so no two units (from any connection or thread) ever
    interleave. The ``async`` variants run the unit in a worker thread so a
    slow OS query holds the lock without stalling the event loop.

    A unit that raises leaves the source in an unknown state: the provider is
    marked poisoned and every later access raises ``ProviderPoisonedError``.
    """

    def __init__(self, source: HostMetricsSource, disk_index: int = 1) -> None:
        if disk_index < 0:
            raise ValueError(f"disk_index must be >= 0, got {disk_index}")
        self._source = source
        self.disk_index = disk_index
        self._lock = threading.Lock()
        self._poisoned = False

    # ── refresh-then-read units ─────────────────────────

    def cpu_usages(self) -> CpuReading:
        return self._unit(
            self._source.refresh_cpu,
            lambda: dict(enumerate(self._source.cpu_usages())),
        )

    def memory_totals(self) -> MemoryReading:
        return self._unit(self._source.refresh_memory, self._source.memory)

    def swap_totals(self) -> MemoryReading:
        return self._unit(self._source.refresh_memory, self._source.swap)

    def disk_totals(self) -> DiskReading | None:
        return self._unit(self._source.refresh_disks, self._select_disk)

    # ── async access ────────────────────────────────────

    async def cpu(self) -> CpuReading:
        return await asyncio.to_thread(self.cpu_usages)

    async def ram(self) -> MemoryReading:
        return await asyncio.to_thread(self.memory_totals)

    async def swap(self) -> MemoryReading:
        return await asyncio.to_thread(self.swap_totals)

    async def disk(self) -> DiskReading | None:
        return await asyncio.to_thread(self.disk_totals)

    async def sample(self) -> MetricsReading:
        """Read CPU, RAM, swap and disk, in that order, as four separate units."""
        cpu = await self.cpu()
        ram = await self.ram()
        swap = await self.swap()
        disk = await self.disk()
        return MetricsReading(cpu=cpu, ram=ram, swap=swap, disk=disk)

    # ── introspection ───────────────────────────────────

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @property
    def source_name(self) -> str:
        return self._source.name

    # ── internals ───────────────────────────────────────

    def _select_disk(self) -> DiskReading | None:
        disks = self._source.disks()
        if len(disks) <= self.disk_index:
            return None
        return disks[self.disk_index]

    def _unit(self, refresh: Callable[[], None], read: Callable[[], T]) -> T:
        with self._lock:
            if self._poisoned:
                raise ProviderPoisonedError("metrics provider was poisoned by an earlier failure")
            try:
                refresh()
                return read()
            except Exception as exc:
                self._poisoned = True
                logger.critical("Metrics source [%s] failed; provider poisoned", self._source.name)
                raise ProviderError(f"metrics source {self._source.name!r} failed: {exc}") from exc
