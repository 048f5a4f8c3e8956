import logging
import sys

from pythonjsonlogger import jsonlogger

from contentguard.core.config import settings

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds application context."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["environment"] = settings.ENVIRONMENT
        log_record["app"] = settings.PROJECT_NAME


def configure_logging():
    """Configure application-wide logging settings with JSON format for production."""

    log_level = logging.WARNING if settings.is_production else logging.INFO

    if settings.is_production:
        # Pipeline events carry their fields as `extra`, which the JSON formatter keeps
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
    else:
        formatter = logging.Formatter(
            fmt=LOG_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        force=True,
    )

    # Silence noisy loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)
    logging.getLogger("google.genai").setLevel(logging.WARNING)

    logging.getLogger("uvicorn.access").handlers = []
    logging.getLogger("uvicorn.error").handlers = []

    api_logger = logging.getLogger("api_logger")
    api_logger.setLevel(log_level)

    # Moderation events stay visible in production
    logging.getLogger("contentguard.events").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with proper level configuration.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if not settings.is_production else logging.INFO)

    return logger
