"""CLI entrypoint."""

from __future__ import annotations

import logging

import uvicorn

from .asgi import create_app
from .mcp_server import create_mcp_server
from .settings import Settings


def main() -> None:
    settings = Settings()
    # stderr only: stdout carries the protocol in stdio mode.
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)

    if settings.mcp_transport == "stdio":
        logger.info("Serving Joplin notebooks over stdio (%s)", settings.joplin_base_url)
        create_mcp_server(settings).run("stdio")
        return

    logger.info(
        "Serving Joplin notebooks on http://%s:%s/mcp", settings.mcp_host, settings.mcp_port
    )
    uvicorn.run(
        create_app(settings),
        host=settings.mcp_host,
        port=settings.mcp_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
