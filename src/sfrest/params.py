"""Turn caller data into the shapes the Salesforce REST API expects.

Everything here is pure: no I/O and no shared state.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence
from urllib.parse import quote_plus

from .models import Credentials


def make_auth_params(
    credentials: Credentials,
    options: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Build the request keywords for the OAuth username/password flow.

    ``options`` are transport keywords accepted by ``requests.request``
    (``timeout``, ``verify``, ``proxies``...). They are passed through as-is,
    except that a ``data`` key is replaced by the form fields. The password
    sent is the user's password followed directly by the security token.
    Nothing is validated; missing values are left for the server to reject.
    """
    form = {
        "grant_type": "password",
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "username": credentials.username,
        "password": (credentials.password or "") + (credentials.security_token or ""),
        "format": "json",
    }
    params = dict(options or {})
    params["data"] = form
    return params


def gen_query_url(version: str, query: str) -> str:
    """Path for a SOQL query, e.g. ``/services/data/v39.0/query?q=SELECT+Id+FROM+Account``."""
    return f"/services/data/v{version}/query?q={quote_plus(query)}"


def fields_fragment(fields: Sequence[str]) -> str:
    """Query string restricting a record fetch to ``fields``."""
    return "?fields=" + ",".join(fields)
