"""API version and rate-limit state.

An :class:`ApiContext` holds the two pieces of mutable state the client
needs: the API version used to build paths and the latest usage reported
by the ``Sforce-Limit-Info`` header. Independent clients can each own one;
``default_context`` is shared by everything that is not given its own.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator, List, Mapping, Optional

_logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "39.0"


class ApiContext:
    def __init__(self, version: str = DEFAULT_API_VERSION) -> None:
        self._version = version
        # Innermost scoped override as a one-item list, so set_version can
        # rebind it; visible only to the thread / task that opened the scope
        self._override: ContextVar[Optional[List[str]]] = ContextVar(
            f"sfrest_version_{id(self):x}", default=None
        )
        self._limit_info: Dict[str, int] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"ApiContext(version={self.version!r}, limit_info={self._limit_info!r})"

    # --------------------------- Version ------------------------------

    @property
    def version(self) -> str:
        """Version in effect right now: a scoped override, else the global one."""
        override = self._override.get()
        return override[0] if override is not None else self._version

    def set_version(self, version: str) -> None:
        """Change the version until it is set again.

        Inside a :meth:`use_version` block only that block's version changes.
        """
        override = self._override.get()
        if override is not None:
            _logger.debug("Scoped API version set to %s", version)
            override[0] = version
        else:
            _logger.debug("API version set to %s", version)
            self._version = version

    @contextmanager
    def use_version(self, version: str) -> Iterator[str]:
        """Use ``version`` inside the block; the previous value comes back on exit."""
        token = self._override.set([version])
        try:
            yield version
        finally:
            self._override.reset(token)

    # --------------------------- Limit info ---------------------------

    def read_limit_info(self) -> Dict[str, int]:
        """Last reported usage, e.g. ``{"used": 11, "available": 15000}``, or ``{}``."""
        with self._lock:
            return dict(self._limit_info)

    def record_limit_info(self, info: Mapping[str, int]) -> None:
        with self._lock:
            self._limit_info = dict(info)


default_context = ApiContext()


def get_version() -> str:
    return default_context.version


def set_version(version: str) -> None:
    default_context.set_version(version)


def use_version(version: str):
    return default_context.use_version(version)


def read_limit_info() -> Dict[str, int]:
    return default_context.read_limit_info()
