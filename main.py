# main.py
# Punto de entrada: API HTTP para revisar correo IMAP y publicarlo como hilo en BlueSky
from __future__ import annotations
import logging
import uvicorn
from config.settings import Settings
from interface_adapters.app import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    app = create_app(settings)

    logger.info("=== Mail -> BlueSky ===")
    logger.info("IMAP host=%s mailbox=%s | BlueSky host=%s", settings.IMAP_HOST or "-", settings.IMAP_MAILBOX, settings.BLUESKY_HOST)
    uvicorn.run(app, host=settings.API_HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
