"""Process-wide client settings, loaded once on import."""

from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv

from config import Settings
from logging_config import setup_logging

load_dotenv()

try:
    settings = Settings()
except ValueError as exc:
    logging.getLogger("bbsclient").error("Invalid configuration: %s", exc)
    raise


def configure_logging(config: Optional[Settings] = None) -> None:
    """Apply ``BBS_DEBUG`` to logging; call once from the embedding application."""
    setup_logging((config or settings).debug)
