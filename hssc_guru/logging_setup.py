import logging
import os

_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def setup_console_logging(level: int | str | None = None) -> None:
    """Send log records to stderr; safe to call more than once.

    The level falls back to GURU_LOG_LEVEL, then INFO.
    """
    if level is None:
        level = os.environ.get("GURU_LOG_LEVEL", "INFO").upper()

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)
    # one line per request is noise next to per-second ticks
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
