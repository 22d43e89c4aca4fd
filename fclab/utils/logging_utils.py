import logging
from typing import Optional

from ..settings import get_settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_path: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for an example script.

    Args:
        level: Level name (falls back to FCLAB_LOG_LEVEL)
        log_path: Optional text log file (falls back to FCLAB_LOG_PATH)

    Returns:
        The "fclab" logger
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    log_path = log_path or settings.log_path

    handlers = [logging.StreamHandler()]
    if log_path:
        handlers.append(logging.FileHandler(log_path, encoding="utf8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    # Provider SDKs log every request at INFO
    for noisy in ("httpx", "openai", "anthropic", "google_genai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logging.getLogger("fclab")
