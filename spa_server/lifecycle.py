"""Process lifecycle: logging setup, signal-triggered shutdown, and uvicorn startup."""

import logging
import signal
import sys
from typing import Optional

import uvicorn

from spa_server.config import Settings, get_settings
from spa_server.main import create_app

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def handle_shutdown_signal(signum, frame) -> None:
    """Log the signal and exit with a success status."""
    logger.info(f"Received {signal.Signals(signum).name}, shutting down server...")
    sys.exit(0)


def install_signal_handlers() -> None:
    for sig in SHUTDOWN_SIGNALS:
        signal.signal(sig, handle_shutdown_signal)


def run(settings: Optional[Settings] = None) -> None:
    """
    Console entry point: start serving on the configured host and port.

    uvicorn captures SIGTERM / SIGINT while its loop runs, then restores the
    handlers installed here and re-raises the captured signal once the loop
    has stopped, so ``handle_shutdown_signal`` runs outside the event loop.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = create_app(settings)
    install_signal_handlers()

    config = uvicorn.Config(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )
    logger.info(f"Listening on http://{settings.HOST}:{settings.PORT}")
    uvicorn.Server(config).run()


if __name__ == "__main__":
    run()
