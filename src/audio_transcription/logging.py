import logging
import sys

from pythonjsonlogger import jsonlogger

_NOISY_LOGGERS = ["pika", "urllib3", "httpx", "httpcore"]


def setup_logging(level: int = logging.INFO):
    """
    Configures structured JSON logging for the transcriber process.

    Installs a single stdout handler with a JSON formatter that includes
    timestamp, level, logger name, message, trace_id and span_id (the last two
    are filled in by ddtrace log injection). The root logger's handlers are
    replaced, so calling this repeatedly from different modules is harmless.
    Chatty client libraries are capped at WARNING.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return root_logger
