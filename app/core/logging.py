import logging
import logging.config
import re

SENSITIVE_PATTERNS = [
    re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"),
    re.compile(r"(?i)((?:comment|authorization)\s*[=:]\s*)([^,\s]+)"),
]


class SensitiveTextFilter(logging.Filter):
    """Redact e-mail addresses and free-text ``comment=`` / ``authorization=`` values."""

    def _sanitize(self, value: object) -> object:
        if not isinstance(value, str):
            return value

        redacted = value
        for pattern in SENSITIVE_PATTERNS:
            if pattern.groups:
                redacted = pattern.sub(r"\1[REDACTED]", redacted)
            else:
                redacted = pattern.sub("[REDACTED]", redacted)
        return redacted

    def filter(self, record: logging.LogRecord) -> bool:
        # Render first so a redacted ``%s`` placeholder cannot break formatting
        try:
            rendered = record.getMessage()
        except (TypeError, ValueError):
            # Mismatched format args: leave rendering to the handler's error path
            record.msg = self._sanitize(record.msg)
            if isinstance(record.args, tuple):
                record.args = tuple(self._sanitize(item) for item in record.args)
            elif isinstance(record.args, dict):
                record.args = {key: self._sanitize(value) for key, value in record.args.items()}
            return True

        record.msg = self._sanitize(rendered)
        record.args = ()
        return True


def setup_logging() -> None:
    from app.core.settings import get_settings

    settings = get_settings()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "sensitive_text": {
                    "()": "app.core.logging.SensitiveTextFilter",
                }
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["sensitive_text"],
                }
            },
            "loggers": {
                "": {
                    "handlers": ["console"],
                    "level": settings.log_level.upper(),
                },
                "uvicorn.access": {
                    "handlers": ["console"],
                    "level": "WARNING",
                    "propagate": False,
                },
            },
        }
    )
