import sys
import logging
from typing import Any, Callable

from loguru import logger

from koshien_digest.config.settings import AppSettings

MASK = "********"


def make_sensitive_data_filter(secrets: list[str]) -> Callable[[dict[str, Any]], bool]:
    """Build a loguru filter that masks configured secrets in log records."""
    secrets = [s for s in secrets if s]
    sensitive_keys = ["key", "token", "password", "secret", "webhook"]

    def sensitive_data_filter(record: dict[str, Any]) -> bool:
        for original in secrets:
            if original in record["message"]:
                record["message"] = record["message"].replace(original, MASK)

        # Also check explicit keys in extra dict
        extra = record.get("extra")
        if isinstance(extra, dict):
            for extra_key, value in extra.items():
                if isinstance(value, str) and any(
                    sk in extra_key.lower() for sk in sensitive_keys
                ):
                    extra[extra_key] = (
                        value[:4] + "****" + value[-4:] if len(value) > 8 else MASK
                    )

        return True  # Keep the record after filtering/masking

    return sensitive_data_filter


class InterceptHandler(logging.Handler):
    """Route standard logging records (httpx, httpcore) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(settings: AppSettings) -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=make_sensitive_data_filter(settings.secrets),
    )

    logger.info(f"Logging initialized with level: {settings.log_level}")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # httpx logs every request URL at INFO, including the roster key
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger.debug("Standard logging intercepted.")
