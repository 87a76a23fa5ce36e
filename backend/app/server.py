"""
Samanvi Backend — Server Entry Point

`samanvi-backend` (console script) or `python -m app.server`.

On SIGTERM/SIGINT uvicorn stops accepting connections and waits up to
SHUTDOWN_GRACE_PERIOD seconds for in-flight requests before the app's
lifespan shutdown disposes the database engine.
"""

import uvicorn

from app.config import settings


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
        timeout_graceful_shutdown=settings.shutdown_grace_period,
    )


if __name__ == "__main__":
    main()
