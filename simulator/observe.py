"""Terminal observer for the host metrics stream.

Connects to the ``/ws`` endpoint and prints each frame the way the web
dashboard renders it: per-core CPU bars, RAM/swap/disk usage in GB.

Usage:
    python simulator/observe.py                          # localhost:9000
    python simulator/observe.py --url ws://host:9000/ws
    python simulator/observe.py --count 5                # stop after 5 frames
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

import websockets

logging.basicConfig(level=logging.INFO, format="%(asctime)s [OBS] %(message)s")
logger = logging.getLogger("observer")

_GB = 1024**3
_BAR_WIDTH = 20


# ── Formatting ───────────────────────────────────────


def percentage(used: float, total: float) -> float:
    if not total:
        return 0.0
    return used / total * 100


def bar(percent: float, width: int = _BAR_WIDTH) -> str:
    filled = round(min(max(percent, 0.0), 100.0) / 100 * width)
    return "#" * filled + "." * (width - filled)


def _usage_line(label: str, usage: dict | None) -> str:
    if usage is None:
        return f"{label:<5} n/a"
    pct = percentage(usage["used"], usage["total"])
    return (
        f"{label:<5} [{bar(pct)}] {pct:5.1f}%  "
        f"Used: {usage['used'] / _GB:.2f} GB, Total: {usage['total'] / _GB:.2f} GB"
    )


def format_frame(payload: dict) -> str:
    lines = []
    for core, usage in sorted(payload["cpu"].items(), key=lambda kv: int(kv[0])):
        lines.append(f"CPU {int(core):<2} [{bar(usage)}] {usage:5.1f}%")
    lines.append(_usage_line("RAM", payload["ram"]))
    lines.append(_usage_line("Swap", payload["swap"]))
    lines.append(_usage_line("Disk", payload["disk"]))
    return "\n".join(lines)


# ── Main runner ──────────────────────────────────────


async def observe(url: str, count: int | None = None) -> int:
    """Print frames until the server closes or ``count`` frames arrive."""
    received = 0
    async with websockets.connect(url) as ws:
        logger.info("Connected to %s", url)
        async for message in ws:
            received += 1
            print(format_frame(json.loads(message)), end="\n\n", flush=True)
            if count is not None and received >= count:
                break
    logger.info("Observer finished after %d frames", received)
    return received


async def main() -> None:
    parser = argparse.ArgumentParser(description="Host metrics stream observer")
    parser.add_argument("--url", default="ws://127.0.0.1:9000/ws", help="WebSocket endpoint")
    parser.add_argument("--count", type=int, help="Stop after this many frames")
    args = parser.parse_args()

    try:
        await observe(args.url, args.count)
    except websockets.ConnectionClosed:
        logger.info("Server closed the stream")


if __name__ == "__main__":
    asyncio.run(main())
