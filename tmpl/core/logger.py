"""Unified logging for tmpl with console and file output."""
import logging
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

LOG_FILE_NAME = "tmpl.log"

# Track if file logging has been set up
_file_logging_configured = False


def setup_file_logging(data_dir: str, log_file: Optional[str] = None, verbose: bool = False) -> Optional[Path]:
    """Log tmpl runs to ``<data_dir>/tmpl.log``, or to ``log_file`` when given.

    A target whose directory cannot be created is replaced by the same file name
    in the system temp directory. Returns the log path, or None when file logging
    was already configured.
    """
    global _file_logging_configured

    if _file_logging_configured:
        return None

    target_log_file = Path(log_file) if log_file else Path(data_dir) / LOG_FILE_NAME
    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = Path(tempfile.gettempdir()) / target_log_file.name

    level = logging.DEBUG if verbose else logging.INFO
    file_handler = logging.FileHandler(target_log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    package_logger = logging.getLogger("tmpl")
    package_logger.addHandler(file_handler)
    package_logger.setLevel(level)
    _file_logging_configured = True

    package_logger.info(f"tmpl logging initialized: {target_log_file}")
    return target_log_file


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance with console output.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger with Rich console handler

    Note:
        File logging must be enabled separately via setup_file_logging()
    """
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False, show_time=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger
