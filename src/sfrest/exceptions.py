from __future__ import annotations

from typing import Any, Dict, Optional


class SalesforceError(RuntimeError):
    """Base class for errors raised by sfrest."""


class MissingCredentialsError(SalesforceError):
    """Raised when the required Salesforce env vars are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))


class NotConnectedError(SalesforceError):
    """Raised when an authorized call is attempted before connect()."""

    def __init__(self) -> None:
        super().__init__("Not connected: call connect() before making API calls.")


class SalesforceHTTPError(SalesforceError):
    """A non-2xx response. ``api_result`` holds the decoded error body."""

    def __init__(
        self,
        status_code: int,
        url: str,
        api_result: Any,
        limit_info: Optional[Dict[str, int]] = None,
    ):
        self.status_code = status_code
        self.url = url
        self.api_result = api_result
        self.limit_info = limit_info or {}
        super().__init__(f"HTTP {status_code} for {url}: {api_result}")


class SalesforceTransportError(SalesforceError):
    """Connection, timeout or TLS failure before any response was received."""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {reason}")


class LimitInfoParseError(SalesforceError, ValueError):
    """The Sforce-Limit-Info header did not contain api-usage=<used>/<available>."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Cannot parse Sforce-Limit-Info header: {value!r}")
