"""Request builders for the sObject REST resources.

Every builder is pure and returns a :class:`RequestDescriptor`. The API
version is taken from ``version`` when given, otherwise from ``context``
(default: the shared context) at the moment the path is built.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from .models import AuthToken, RequestDescriptor
from .params import fields_fragment, gen_query_url
from .prepare import prepare_request
from .state import ApiContext, default_context

Options = Optional[Mapping[str, Any]]


def _resolve_version(version: Optional[str], context: Optional[ApiContext]) -> str:
    return version if version is not None else (context or default_context).version


def _base(version: Optional[str], context: Optional[ApiContext]) -> str:
    return f"/services/data/v{_resolve_version(version, context)}"


def _with_body(options: Options, body: Any) -> dict:
    merged = dict(options or {})
    merged["json"] = body
    return merged


def resources_prepare(
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    """Root resources available for the API version."""
    return prepare_request("GET", _base(version, context) + "/", token, options)


def objects_prepare(
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    """All sObject types (global describe)."""
    return prepare_request("GET", _base(version, context) + "/sobjects", token, options)


def sobject_prepare(
    sobject: str,
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    """Basic metadata for one sObject type, including ``recentItems``."""
    return prepare_request("GET", f"{_base(version, context)}/sobjects/{sobject}", token, options)


def describe_prepare(
    sobject: str,
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    return prepare_request(
        "GET", f"{_base(version, context)}/sobjects/{sobject}/describe", token, options
    )


def get_prepare(
    sobject: str,
    identifier: str,
    token: AuthToken,
    fields: Optional[Sequence[str]] = None,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    """Fetch one record.

    With ``fields`` (even an empty list) only those fields are requested;
    with ``fields=None`` the whole record is fetched.
    """
    path = f"{_base(version, context)}/sobjects/{sobject}/{identifier}"
    if fields is not None:
        path += fields_fragment(fields)
    return prepare_request("GET", path, token, options)


def create_prepare(
    sobject: str,
    record: Mapping[str, Any],
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    return prepare_request(
        "POST",
        f"{_base(version, context)}/sobjects/{sobject}/",
        token,
        _with_body(options, dict(record)),
    )


def update_prepare(
    sobject: str,
    identifier: str,
    record: Mapping[str, Any],
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    """Partial update: only the fields in ``record`` are changed."""
    return prepare_request(
        "PATCH",
        f"{_base(version, context)}/sobjects/{sobject}/{identifier}",
        token,
        _with_body(options, dict(record)),
    )


def delete_prepare(
    sobject: str,
    identifier: str,
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    return prepare_request(
        "DELETE", f"{_base(version, context)}/sobjects/{sobject}/{identifier}", token, options
    )


def flow_prepare(
    name: str,
    token: AuthToken,
    data: Optional[Mapping[str, Any]] = None,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    """Invoke an autolaunched flow, e.g. ``{"inputs": [{"CommentCount": 6}]}``."""
    body = dict(data) if data is not None else {"inputs": []}
    return prepare_request(
        "POST",
        f"{_base(version, context)}/actions/custom/flow/{name}",
        token,
        _with_body(options, body),
    )


def soql_prepare(
    query: str,
    token: AuthToken,
    options: Options = None,
    *,
    version: Optional[str] = None,
    context: Optional[ApiContext] = None,
) -> RequestDescriptor:
    """Run an arbitrary SOQL query, e.g. ``SELECT Name FROM Account``."""
    path = gen_query_url(_resolve_version(version, context), query)
    return prepare_request("GET", path, token, options)
