"""Request execution: the only place sfrest talks to the network."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional

import requests

from .exceptions import LimitInfoParseError, SalesforceHTTPError, SalesforceTransportError
from .models import RequestDescriptor, ResponseEnvelope
from .state import ApiContext, default_context

_logger = logging.getLogger(__name__)

LIMIT_INFO_HEADER = "Sforce-Limit-Info"

# Salesforce may append "; per-app-api-usage=17/250(appName=...)"
_API_USAGE_RE = re.compile(r"(?<![\w-])api-usage=(?P<used>\d+)/(?P<available>\d+)")


def parse_limit_info(value: str) -> Dict[str, int]:
    """Parse ``api-usage=<used>/<available>`` into ``{"used": .., "available": ..}``.

    Raises :class:`LimitInfoParseError` rather than guessing, so a bad
    header never ends up in the tracker.
    """
    match = _API_USAGE_RE.search(value or "")
    if not match:
        raise LimitInfoParseError(value)
    return {"used": int(match.group("used")), "available": int(match.group("available"))}


def _find_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def _record_limit_info(raw: Optional[str], ctx: ApiContext) -> Dict[str, int]:
    if raw is None:
        return {}
    limit_info = parse_limit_info(raw)
    ctx.record_limit_info(limit_info)
    _logger.debug("API usage %s/%s", limit_info["used"], limit_info["available"])
    return limit_info


def _decode_body(resp: requests.Response) -> Any:
    # 204 No Content from update/delete
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def perform_request(
    descriptor: RequestDescriptor,
    *,
    session: Optional[requests.Session] = None,
    context: Optional[ApiContext] = None,
) -> ResponseEnvelope:
    """Send ``descriptor`` and return the decoded body with its limit info.

    The usage header, when present, is recorded on ``context`` (the shared
    default context unless one is given) before any error is raised.
    Non-2xx responses raise :class:`SalesforceHTTPError`; transport failures
    raise :class:`SalesforceTransportError`. Nothing is retried.
    """
    ctx = context or default_context
    send = session.request if session is not None else requests.request

    _logger.debug("%s %s", descriptor.method, descriptor.url)
    try:
        resp = send(
            descriptor.method,
            descriptor.url,
            headers=dict(descriptor.headers),
            **dict(descriptor.options),
        )
    except requests.RequestException as e:
        _logger.warning("Request error for %s %s: %s", descriptor.method, descriptor.url, e)
        raise SalesforceTransportError(descriptor.method, descriptor.url, str(e)) from e

    api_result = _decode_body(resp)
    raw = _find_header(resp.headers or {}, LIMIT_INFO_HEADER)

    if not 200 <= resp.status_code < 300:
        _logger.error("HTTP %s error for %s: %s", resp.status_code, descriptor.url, api_result)
        try:
            limit_info = _record_limit_info(raw, ctx)
        except LimitInfoParseError as e:
            # Keep the status and body; the bad header rides along as the cause
            raise SalesforceHTTPError(resp.status_code, descriptor.url, api_result) from e
        raise SalesforceHTTPError(resp.status_code, descriptor.url, api_result, limit_info)

    limit_info = _record_limit_info(raw, ctx)

    return ResponseEnvelope(api_result=api_result, limit_info=limit_info)
