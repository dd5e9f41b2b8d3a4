from __future__ import annotations

from abc import ABC, abstractmethod

from hoststream.models.metrics import DiskReading, MemoryReading


class HostMetricsSource(ABC):
    """Abstract OS-metrics capability.

    ``refresh_*`` methods query the operating system and are idempotent.
    Read accessors never touch the OS; they return what the most recent
    refresh of the matching category captured, in bytes for memory and disk
    and in percent (0-100, one entry per logical core) for CPU.
    """

    name: str = "base"

    # ── refresh ──────────────────────────────────────────

    @abstractmethod
    def refresh_cpu(self) -> None: ...

    @abstractmethod
    def refresh_memory(self) -> None: ...

    @abstractmethod
    def refresh_disks(self) -> None: ...

    # ── read ─────────────────────────────────────────────

    @abstractmethod
    def cpu_usages(self) -> list[float]:
        """Per-core usage, ordered by logical core index."""
        ...

    @abstractmethod
    def memory(self) -> MemoryReading: ...

    @abstractmethod
    def swap(self) -> MemoryReading: ...

    @abstractmethod
    def disks(self) -> list[DiskReading]:
        """Every enumerated disk, in enumeration order."""
        ...
