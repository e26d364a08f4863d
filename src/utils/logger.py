import logging
import os

from rich.logging import RichHandler

LOG_FILE_ENV = "LABELDESK_LOG_FILE"


class CenteredFormatter(logging.Formatter):
    longest_name_length = 14  # grows with the longest logger name seen

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(record.name)
        )

        width = CenteredFormatter.longest_name_length
        record.name = record.name.center(width)
        return super().format(record)


def _build_handler(log_level: int) -> logging.Handler:
    # the TUI owns the terminal, so a log file replaces console output when set
    log_file = os.getenv(LOG_FILE_ENV)
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            CenteredFormatter("%(asctime)s %(levelname)-8s [%(name)s]  %(message)s")
        )
    else:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
    handler.setLevel(log_level)
    return handler


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger writing through RichHandler,
    or to the file named by LABELDESK_LOG_FILE.
    """
    if name is None:
        name = "labeldesk"
    logger = logging.getLogger(name)
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        logger.addHandler(_build_handler(log_level))
        logger.propagate = False
        logger.debug(f"Logger for '{name}' initialized.")

    return logger
