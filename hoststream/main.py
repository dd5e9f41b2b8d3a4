from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hoststream.api.routes import ConnectionManager, router
from hoststream.config import settings
from hoststream.provider import MetricsProvider, PsutilSource

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── startup ───────────────────────────────────────
    provider = MetricsProvider(PsutilSource(), disk_index=settings.disk_index)
    app.state.provider = provider
    app.state.connection_manager = ConnectionManager(provider, interval=settings.tick_interval)

    logger.info(
        "Host metrics stream ready (source=%s, interval=%.1fs, disk_index=%d)",
        provider.source_name,
        settings.tick_interval,
        settings.disk_index,
    )

    yield

    # ── shutdown ──────────────────────────────────────
    logger.info("Host metrics stream shut down")


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=settings.cors_methods,
    allow_headers=["*"],
)

app.include_router(router)
