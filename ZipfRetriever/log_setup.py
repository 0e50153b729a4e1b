import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def configure_logging(level=logging.INFO, console: Console = None) -> None:
    """
    Route log records through rich on the root logger.

    Args:
        level: Logging level (name or number)
        console: Console to render on; rich's default console when None
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="[%X]"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
