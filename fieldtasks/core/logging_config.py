"""Logging configuration for the API process."""
import logging

_logging_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure console logging on the root logger.

    Idempotent: repeated calls (one per app factory invocation) only configure once.
    """
    global _logging_configured

    if _logging_configured:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-5s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(console_handler)

    # uvicorn's access log duplicates MetricsMiddleware's view of requests
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _logging_configured = True
