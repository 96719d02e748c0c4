"""Request assembly.

Each builder returns a :class:`RequestDescriptor` and never touches the
network, so the result can be compared directly in tests.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .models import AuthToken, Credentials, RequestDescriptor
from .params import make_auth_params

_logger = logging.getLogger(__name__)

DEFAULT_LOGIN_HOST = "login.salesforce.com"

# Keys the assembler owns; caller options cannot replace them
_RESERVED = ("method", "url", "headers")


def _split_options(options: Optional[Mapping[str, Any]]) -> dict:
    return {k: v for k, v in (options or {}).items() if k not in _RESERVED}


def prepare_request(
    method: str,
    path: str,
    token: AuthToken,
    options: Optional[Mapping[str, Any]] = None,
) -> RequestDescriptor:
    """Authorized request for ``path`` relative to the token's instance URL."""
    ignored = sorted(k for k in (options or {}) if k in _RESERVED)
    if ignored:
        _logger.debug("Ignoring reserved request options: %s", ignored)
    return RequestDescriptor(
        method=method,
        url=f"{token.instance_url}{path}",
        headers={"Authorization": f"Bearer {token.access_token}"},
        options=_split_options(options),
    )


def prepare_public_request(
    method: str,
    url: str,
    options: Optional[Mapping[str, Any]] = None,
) -> RequestDescriptor:
    """Unauthenticated request to an absolute ``url``."""
    headers = dict((options or {}).get("headers") or {})
    return RequestDescriptor(
        method=method, url=url, headers=headers, options=_split_options(options)
    )


def auth_prepare(
    credentials: Credentials,
    options: Optional[Mapping[str, Any]] = None,
) -> RequestDescriptor:
    """POST to the OAuth token endpoint of ``credentials.login_host``."""
    host = credentials.login_host or DEFAULT_LOGIN_HOST
    return RequestDescriptor(
        method="POST",
        url=f"https://{host}/services/oauth2/token",
        options=_split_options(make_auth_params(credentials, options)),
    )
