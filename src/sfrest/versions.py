"""Salesforce REST API version discovery."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional

import requests

from .exceptions import SalesforceError
from .perform import perform_request
from .prepare import prepare_public_request
from .state import ApiContext, default_context

_logger = logging.getLogger(__name__)

VERSIONS_URL = "http://na1.salesforce.com/services/data/"


def all_versions(
    session: Optional[requests.Session] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """List every available version as ``{"label", "url", "version"}`` dicts."""
    descriptor = prepare_public_request("GET", VERSIONS_URL, options)
    envelope = perform_request(descriptor, session=session)
    return envelope.api_result or []


def latest_version(
    session: Optional[requests.Session] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> str:
    """Version string of the last entry returned by the discovery endpoint.

    The endpoint lists versions in ascending order and this relies on it:
    no sorting is done here.
    """
    versions = all_versions(session=session, options=options)
    if not versions:
        raise SalesforceError(f"No API versions returned by {VERSIONS_URL}")
    latest = versions[-1]["version"]
    _logger.debug("Latest API version discovered: %s", latest)
    return latest


@lru_cache(maxsize=None)
def _cached_latest_version() -> str:
    return latest_version()


@contextmanager
def use_latest_version(context: Optional[ApiContext] = None) -> Iterator[str]:
    """Scoped override with the latest version; discovery runs once per process."""
    with (context or default_context).use_version(_cached_latest_version()) as v:
        yield v
