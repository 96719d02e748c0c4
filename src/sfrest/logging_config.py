from __future__ import annotations

import logging
from typing import Optional, Union

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

# Chatty transport loggers; at DEBUG they would echo every connection
_NOISY_LOGGERS = ("urllib3.connection", "urllib3.connectionpool")


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Configure root logging once; later calls only change the level.

    ``level`` may be a number or a name such as ``"DEBUG"``; ``None`` means
    WARNING.
    """
    if isinstance(level, str):
        lvl = logging.getLevelName(level.upper())
        if not isinstance(lvl, int):
            raise ValueError(f"Unknown log level: {level!r}")
    else:
        lvl = level if level is not None else logging.WARNING

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(lvl)
    else:
        logging.basicConfig(level=lvl, format=_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)

    for name in _NOISY_LOGGERS:
        noisy = logging.getLogger(name)
        if noisy.level == logging.NOTSET or noisy.level < logging.WARNING:
            noisy.setLevel(logging.WARNING)
