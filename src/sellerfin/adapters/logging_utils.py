import json
import logging
import sys
from datetime import datetime, timezone

from .config import config

# keys owned by the formatter; context entries may not overwrite them
_RESERVED = ("ts", "level", "logger", "env", "message", "exception")


class JsonLogFormatter(logging.Formatter):
    """
    One JSON object per line.

    Offer fields passed as ``extra={"context": {...}}`` are merged at the top
    level; values json cannot encode fall back to str().
    """

    def __init__(self, env: str | None = None) -> None:
        super().__init__()
        self.env = env if env is not None else config.ENV

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "env": self.env,
            "message": record.getMessage(),
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update({k: v for k, v in ctx.items() if k not in _RESERVED})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    logger.addHandler(handler)
    logger.setLevel(config.LOG_LEVEL.upper())
    logger.propagate = False
    return logger
