"""Logging configuration helpers."""

import logging

# Chatty per-request loggers from the HTTP stacks under supabase and FDC.
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack")


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the walklet_api logger tree.

    Safe to call repeatedly; only the level is refreshed on later calls.
    """
    logger = logging.getLogger("walklet_api")
    logger.setLevel(level.upper())
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
