"""
Application logging configuration.

Call ``configure_logging()`` once at startup (the API factory does this)
so every module logger created with ``logging.getLogger(__name__)``
shares the same format. The engines only log their decisions at DEBUG
level; ``trace_engines`` turns those records on without making the rest
of the application verbose.
"""
import logging

ENGINE_LOGGER_NAME = "settlement.core.services"


def configure_logging(level: str = "INFO", trace_engines: bool = False) -> None:
    """Configure the root logger with a simple format.

    :param level: Logging level (e.g., 'DEBUG', 'INFO').
    :param trace_engines: Emit the engines' DEBUG decision records.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if trace_engines:
        logging.getLogger(ENGINE_LOGGER_NAME).setLevel(logging.DEBUG)
