"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_provisioner.interface.dependencies import shutdown, startup
from repo_provisioner.interface.error_handlers import register_error_handlers
from repo_provisioner.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup()
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Project Repository Provisioner",
        version="1.0.0",
        description=(
            "Creates, forks and synchronizes per-project GitHub repositories "
            "for Music Blocks, and proposes fork changes upstream as pull "
            "requests."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    # ── Health check (simple liveness probe) ────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
