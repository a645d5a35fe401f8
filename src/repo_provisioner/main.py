"""Console entry point: ``repo-provisioner`` serves the API with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from repo_provisioner.infrastructure.config import get_settings


def main() -> None:
    """Configure logging from settings and start the ASGI server."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    uvicorn.run(
        "repo_provisioner.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
