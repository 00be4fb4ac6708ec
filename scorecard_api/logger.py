# scorecard_api/logger.py
import logging
from datetime import datetime
from pathlib import Path

from scorecard_api.config import SCORECARD_LOG_DIR, SCORECARD_LOG_LEVEL

_LOGGERS = {}


def get_logger(name: str) -> logging.Logger:
    """
    Create or retrieve a named logger.

    - name: logger namespace (e.g. scorecard.panel, scorecard.api)

    Console output always; a per-run file under SCORECARD_LOG_DIR when set.
    """
    if name in _LOGGERS:
        return _LOGGERS[name]

    logger = logging.getLogger(name)
    logger.setLevel(SCORECARD_LOG_LEVEL)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if SCORECARD_LOG_DIR:
        log_dir = Path(SCORECARD_LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        file_handler = logging.FileHandler(log_dir / f"scorecard-{timestamp}.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _LOGGERS[name] = logger

    return logger
