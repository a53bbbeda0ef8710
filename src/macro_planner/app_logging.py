"""Logging configuration helpers."""

import logging
from collections.abc import Iterable

APP_LOGGER = "macro_planner"
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"
REDACTED = "[redacted]"

# HTTP client used by supabase; logs every request at INFO.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


class SecretRedactingFilter(logging.Filter):
    """Replace configured secrets in log messages."""

    def __init__(self, secrets: Iterable[str]) -> None:
        super().__init__()
        self.secrets = [secret.strip() for secret in secrets if secret.strip()]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        redacted = message
        for secret in self.secrets:
            redacted = redacted.replace(secret, REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def configure_logging(level: str = "INFO", secrets: Iterable[str] = ()) -> None:
    """Configure the application logger with a single stream handler.

    Repeated calls reuse the handler and replace its level and secrets.
    Transport loggers stay at WARNING unless the level is DEBUG.
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level.upper())
    logger.propagate = False

    if logger.handlers:
        handler = logger.handlers[0]
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    for existing in list(handler.filters):
        if isinstance(existing, SecretRedactingFilter):
            handler.removeFilter(existing)
    handler.addFilter(SecretRedactingFilter(secrets))

    debug = logger.level == logging.DEBUG
    transport_level = logging.DEBUG if debug else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
