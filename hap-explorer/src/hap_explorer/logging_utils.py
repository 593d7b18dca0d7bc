from __future__ import annotations

import logging
from typing import Optional, Union

_LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def resolve_logger(logger: Optional[logging.Logger], name: str) -> logging.Logger:
    return logger if logger is not None else logging.getLogger(name)
