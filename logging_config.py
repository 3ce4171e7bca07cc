"""Logging configuration helpers for the node client."""

import logging
from contextvars import ContextVar

operation_ctx: ContextVar[str] = ContextVar("operation", default="-")

logger = logging.getLogger("bbsclient")


def setup_logging(debug: bool) -> None:
    """Configure root logging with operation-name support."""
    record_factory = logging.getLogRecordFactory()

    def _with_operation(*args, **kwargs) -> logging.LogRecord:
        record = record_factory(*args, **kwargs)
        record.operation = operation_ctx.get("-")
        return record

    logging.setLogRecordFactory(_with_operation)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s [%(operation)s]: %(message)s",
    )
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
