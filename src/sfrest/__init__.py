"""Small Salesforce REST API client with pure request preparation."""

from importlib.metadata import PackageNotFoundError, version  # pragma: no cover

from .models import AuthToken, Credentials, RequestDescriptor, ResponseEnvelope
from .state import (
    ApiContext,
    default_context,
    get_version,
    read_limit_info,
    set_version,
    use_version,
)

try:
    __version__ = version("sfrest")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
finally:
    del version, PackageNotFoundError

__all__ = [
    "ApiContext",
    "AuthToken",
    "Credentials",
    "RequestDescriptor",
    "ResponseEnvelope",
    "default_context",
    "get_version",
    "read_limit_info",
    "set_version",
    "use_version",
]
