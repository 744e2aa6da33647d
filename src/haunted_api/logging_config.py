import logging
import os
from typing import Mapping, Optional

LOG_LEVEL_ENV = "HAUNTED_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

# requests logs every connection through urllib3; one line per room request is enough
_CHATTY_LOGGERS = ("urllib3",)


def resolve_level(default_level: int, environ: Optional[Mapping[str, str]] = None) -> int:
    """Level named by HAUNTED_LOG_LEVEL (name or number), else default_level."""
    env = os.environ if environ is None else environ
    raw = (env.get(LOG_LEVEL_ENV) or "").strip()
    if not raw:
        return default_level
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    logging.getLogger(__name__).warning("Unknown %s=%r; using %s", LOG_LEVEL_ENV, raw, logging.getLevelName(default_level))
    return default_level


def configure_logging(default_level: int = logging.INFO) -> int:
    """Configure the root logger for the engine and CLI; returns the level used.

    The HAUNTED_LOG_LEVEL environment variable overrides default_level.
    HTTP connection chatter stays at WARNING unless DEBUG is requested.
    """
    level = resolve_level(default_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)
    return level
