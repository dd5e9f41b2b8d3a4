from __future__ import annotations

import json
import math
from typing import Any

from hoststream.errors import EncodingError
from hoststream.models.metrics import CpuReading, DiskReading, MemoryReading, MetricsReading


def build_payload(
    cpu: CpuReading,
    ram: MemoryReading,
    swap: MemoryReading,
    disk: DiskReading | None,
) -> dict[str, Any]:
    """Assemble the four-key frame document. Values pass through untouched."""
    return {
        "cpu": dict(cpu),
        "ram": ram.model_dump(),
        "swap": swap.model_dump(),
        "disk": disk.model_dump() if disk is not None else None,
    }


def payload_from_reading(reading: MetricsReading) -> dict[str, Any]:
    return build_payload(reading.cpu, reading.ram, reading.swap, reading.disk)


def _finite(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def encode_frame(payload: dict[str, Any]) -> str:
    """Render a payload as JSON text. NaN and infinities are written as null."""
    try:
        return json.dumps(_finite(payload), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"payload is not serializable: {exc}") from exc
