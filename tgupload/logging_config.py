from __future__ import annotations

import copy
import logging.config
from typing import Any, Dict, Optional

from .settings import settings


# Applications and scripts log to stdout; the library itself only creates loggers.
LOGGING: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"}
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "loggers": {
        "tgupload": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "httpx": {"handlers": ["default"], "level": "WARNING", "propagate": False},
        "": {"handlers": ["default"], "level": "INFO"},  # root logger
    },
}


def configure_logging(level: Optional[str] = None) -> Dict[str, Any]:
    config = copy.deepcopy(LOGGING)
    config["loggers"]["tgupload"]["level"] = (level or settings.LOG_LEVEL).upper()
    logging.config.dictConfig(config)
    return config
