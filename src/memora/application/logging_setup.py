import logging
from pathlib import Path

from ulid import ULID

from .config import AppConfig

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def setup_logging(config: AppConfig) -> tuple[logging.Logger, Path, str]:
    """
    Attach a per-run file handler under config.log_dir.

    Verbosity: 0 -> WARNING, 1 -> INFO, 2+ -> DEBUG.

    Returns:
        (package logger, log file path, run id)
    """
    run_id = str(ULID())
    config.log_dir.mkdir(parents=True, exist_ok=True)
    log_path = config.log_dir / f"memora_{run_id}.log"

    if config.verbose <= 0:
        level = logging.WARNING
    elif config.verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger = logging.getLogger("memora")
    logger.setLevel(level)

    # One run log at a time
    for old in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(old)
        old.close()

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    logger.debug(f"Run {run_id} logging to {log_path}")
    return logger, log_path, run_id
