"""Logging setup for DayPlanner front-ends.

Library modules only create ``dayplanner.*`` loggers; entry points call
``configure_logging`` once to attach a rotating file handler.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dayplanner.workspace import logs_dir, workspace_root

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(root: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Attach a file handler to the ``dayplanner`` logger (idempotent)."""
    if root is None:
        root = workspace_root()
    logger = logging.getLogger("dayplanner")
    if not any(getattr(h, "_dayplanner", False) for h in logger.handlers):
        log_dir = logs_dir(root)
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / "dayplanner.log", maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._dayplanner = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
