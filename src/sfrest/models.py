from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

_TOKEN_FIELDS = ("access_token", "instance_url", "id", "issued_at", "signature", "token_type")


# ----------------------------------------------------------------------
# Inputs
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Credentials:
    """Connected-app and user credentials for the username/password flow."""

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    security_token: Optional[str] = None

    # Defaults to login.salesforce.com; use test.salesforce.com for sandboxes
    login_host: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"Credentials(client_id={self.client_id!r}, username={self.username!r}, "
            f"login_host={self.login_host!r})"
        )


@dataclass(frozen=True)
class AuthToken:
    """Result of a successful OAuth login.

    Only ``access_token`` and ``instance_url`` are used to build requests;
    anything else the server returned is kept in ``extra``.
    """

    access_token: str
    instance_url: str
    id: Optional[str] = None
    issued_at: Optional[str] = None
    signature: Optional[str] = None
    token_type: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> AuthToken:
        known = {k: payload.get(k) for k in _TOKEN_FIELDS}
        extra = {k: v for k, v in payload.items() if k not in _TOKEN_FIELDS}
        return cls(extra=extra, **known)

    def __repr__(self) -> str:
        return f"AuthToken(instance_url={self.instance_url!r}, id={self.id!r})"


# ----------------------------------------------------------------------
# Request / response shapes
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue one HTTP call.

    ``options`` holds the remaining keyword arguments for
    ``requests.request`` (``data``, ``json``, ``params``, ``timeout``, ...).
    Descriptors compare by value but are not hashable.
    """

    __hash__ = None  # type: ignore[assignment]

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def as_dict(self) -> Dict[str, Any]:
        """Flat view: method, url, headers (when present) and every option."""
        out: Dict[str, Any] = dict(self.options)
        out["method"] = self.method
        out["url"] = self.url
        if self.headers:
            out["headers"] = dict(self.headers)
        return out


@dataclass
class ResponseEnvelope:
    """Uniform result of every executed call."""

    api_result: Any
    limit_info: Dict[str, int] = field(default_factory=dict)
