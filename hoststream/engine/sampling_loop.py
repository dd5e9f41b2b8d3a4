from __future__ import annotations

import asyncio
import logging
import uuid
from enum import StrEnum
from typing import Awaitable, Callable

from hoststream.engine.encoder import encode_frame, payload_from_reading
from hoststream.provider.metrics_provider import MetricsProvider

logger = logging.getLogger(__name__)

Sender = Callable[[str], Awaitable[None]]


class SessionState(StrEnum):
    ACTIVE = "active"
    CLOSED = "closed"


class SamplingLoop:
    """Streams one frame per tick to a single observer.

    Ticks are scheduled from the loop's start time on the event-loop clock;
    the first fires immediately. Ticks missed while a tick overran the period
    fire back to back until the schedule is caught up.

    The loop ends only when ``send`` raises (the observer went away) or the
    task is cancelled. Provider and encoding failures are fatal and propagate.
    """

    def __init__(
        self,
        provider: MetricsProvider,
        send: Sender,
        interval: float = 1.0,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.session_id = uuid.uuid4().hex[:12]
        self.interval = interval
        self._provider = provider
        self._send = send
        self._state = SessionState.ACTIVE
        self._frames_sent = 0

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        start = loop.time()
        tick = 0
        logger.info("Session [%s] streaming (interval=%.1fs)", self.session_id, self.interval)
        try:
            while self._state is SessionState.ACTIVE:
                delay = start + tick * self.interval - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)
                await self.tick()
                tick += 1
        finally:
            self._state = SessionState.CLOSED
            logger.info("Session [%s] closed after %d frames", self.session_id, self._frames_sent)

    async def tick(self) -> bool:
        """Sample, encode and push one frame. Returns False once the peer is gone."""
        reading = await self._provider.sample()
        frame = encode_frame(payload_from_reading(reading))
        try:
            await self._send(frame)
        except Exception as exc:
            self._state = SessionState.CLOSED
            logger.info("Session [%s] send failed, closing: %r", self.session_id, exc)
            return False
        self._frames_sent += 1
        return True

    # ── introspection ───────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def frames_sent(self) -> int:
        return self._frames_sent
