import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# requests' connection pool and charset sniffing log every fetch at DEBUG
HTTP_LOGGERS = ("urllib3", "requests", "charset_normalizer")

_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def resolve_level(level: str | None = None) -> int:
    """
    Pick the bot's log level.
    Priority:
      1) explicit level argument (--log-level)
      2) env LEADER1_LOG_LEVEL, then LOG_LEVEL
      3) default INFO
    Unknown names fall back to INFO.
    """
    name = (level or os.getenv("LEADER1_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()
    name = _ALIASES.get(name, name)
    if name not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
        name = "INFO"
    return getattr(logging, name)


def quiet_http_loggers(floor: int = logging.WARNING) -> None:
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(floor)


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT)
    quiet_http_loggers()
