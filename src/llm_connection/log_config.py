"""Package logger."""

import logging

logger = logging.getLogger("llm_connection")
logger.addHandler(logging.NullHandler())


def setup_logging(level: int | str = logging.INFO) -> None:
    """Attach a stream handler to the package logger.

    Library code never calls this; applications opt in.
    """
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
