"""
Logging configuration for the invtrack CLI.
"""

import logging
import sys


class ConsoleFormatter(logging.Formatter):
    """Timestamped single-line format, dimmed when stderr is a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{record.created:.3f}] {record.levelname} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if sys.stderr.isatty():
            return f"\033[0;36m{line}\033[0m"
        return line


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """Setup logging configuration.

    Args:
        level: Level name used when debug is off
        debug: Force DEBUG level
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ConsoleFormatter())
    root_logger.addHandler(console_handler)

    # Request-level chatter from the HTTP client stays at WARNING
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
