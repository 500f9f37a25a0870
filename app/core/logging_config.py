# app/core/logging_config.py
import logging.config

from app.core.config import get_settings


def configure_logging(level: str | None = None) -> None:
    """
    Install the process-wide logging configuration.

    Uvicorn's own loggers keep their handlers; application modules log through
    `logging.getLogger(__name__)` under the "app" namespace.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "app": {"handlers": ["console"], "level": level, "propagate": False},
                "scripts": {"handlers": ["console"], "level": level, "propagate": False},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
