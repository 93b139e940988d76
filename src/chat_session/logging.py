import logging
import os
import sys

from pythonjsonlogger import jsonlogger

_configured = False


def setup_logging(name: str = "chat_session") -> logging.Logger:
    """
    Configures structured JSON logging and returns a named logger.

    The root logger gets a single stdout handler with a JSON formatter that
    includes timestamp, level, logger name, message, trace_id and span_id
    (filled in by ddtrace log injection when tracing is active). Uvicorn
    loggers are routed through the same handler so request logs share the
    format. Configuration happens once per process; later calls only look up
    the logger.

    Args:
        name: Logger name, usually the calling module's ``__name__``.

    Returns:
        logging.Logger: The requested logger.
    """
    global _configured
    if not _configured:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
        )
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)

        level = os.getenv("LOG_LEVEL", "INFO").upper()

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers = []
        root_logger.addHandler(stream_handler)

        for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
            u_logger = logging.getLogger(logger_name)
            u_logger.setLevel(level)
            u_logger.handlers = []
            u_logger.addHandler(stream_handler)
            u_logger.propagate = False

        _configured = True

    return logging.getLogger(name)
