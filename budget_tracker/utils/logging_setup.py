import logging
import os
from logging.handlers import RotatingFileHandler

from budget_tracker.utils.constants import LOG_FILE

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_folder: str | None = None) -> None:
    """Configure the root logger once at start-up.

    Logs go to stderr; when log_folder is given they are also written to a
    rotating file there, next to the database.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_folder:
        os.makedirs(log_folder, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                os.path.join(log_folder, LOG_FILE),
                maxBytes=1_000_000,
                backupCount=3,
                encoding="utf-8",
            )
        )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
