from __future__ import annotations

import logging
import os
import signal
from typing import Callable

from fastapi import APIRouter, HTTPException, Request, WebSocket
from starlette.websockets import WebSocketState

from hoststream.engine.encoder import payload_from_reading
from hoststream.engine.sampling_loop import SamplingLoop
from hoststream.errors import FatalStreamError
from hoststream.provider.metrics_provider import MetricsProvider

logger = logging.getLogger(__name__)

router = APIRouter()

FatalHook = Callable[[FatalStreamError], None]


def terminate_process(exc: FatalStreamError) -> None:
    """Ask the server to shut down; uvicorn handles SIGTERM gracefully."""
    os.kill(os.getpid(), signal.SIGTERM)


# ── WebSocket connection manager ──────────────────────


class ConnectionManager:
    """Binds each accepted WebSocket to its own SamplingLoop.

    Sessions are not tracked: each one lives exactly as long as its handler
    and only process shutdown ends them all at once.
    """

    def __init__(
        self,
        provider: MetricsProvider,
        interval: float = 1.0,
        on_fatal: FatalHook = terminate_process,
    ) -> None:
        self.provider = provider
        self.interval = interval
        self.on_fatal = on_fatal

    async def handle(self, websocket: WebSocket) -> None:
        await websocket.accept()
        session = SamplingLoop(self.provider, websocket.send_text, interval=self.interval)
        try:
            await session.run()
        except FatalStreamError as exc:
            self.fatal(exc)
            await self._close(websocket, code=1011)

    def fatal(self, exc: FatalStreamError) -> None:
        logger.critical("Fatal streaming error, terminating: %s", exc, exc_info=exc)
        self.on_fatal(exc)

    @staticmethod
    async def _close(websocket: WebSocket, code: int) -> None:
        if websocket.application_state is not WebSocketState.CONNECTED:
            return
        try:
            await websocket.close(code=code)
        except (RuntimeError, OSError):
            logger.debug("WebSocket already gone, close frame not sent")


# ── REST routes ───────────────────────────────────────


@router.get("/api/snapshot")
async def get_snapshot(request: Request) -> dict:
    state = request.app.state
    try:
        reading = await state.provider.sample()
    except FatalStreamError as exc:
        state.connection_manager.fatal(exc)
        raise HTTPException(status_code=503, detail="Metrics provider unavailable") from exc
    return payload_from_reading(reading)


@router.get("/api/status")
async def get_status(request: Request) -> dict:
    state = request.app.state
    provider: MetricsProvider = state.provider
    return {
        "status": "degraded" if provider.poisoned else "running",
        "source": provider.source_name,
        "provider_poisoned": provider.poisoned,
        "disk_index": provider.disk_index,
        "tick_interval": state.connection_manager.interval,
    }


# ── WebSocket endpoint ────────────────────────────────


@router.websocket("/ws")
async def websocket_metrics(websocket: WebSocket) -> None:
    await websocket.app.state.connection_manager.handle(websocket)
