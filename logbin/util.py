import logging
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_file_logging(log_dir: Path, level: str = "INFO") -> Path:
    """
    Route the package's loggers to a file

    The TUI owns the terminal, so log output must never reach stdout or
    stderr while it runs.

    Returns:
        Path of the log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "logbin.log"

    logger = logging.getLogger("logbin")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Create file handler if not already exists
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    # Don't let records bubble up to a root handler writing to stderr
    logger.propagate = False
    return log_file
