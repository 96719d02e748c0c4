from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .models import AuthToken, Credentials


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class SFConfig:
    """Settings for :class:`sfrest.api.SalesforceAPI`, usually read from SF_* env vars."""

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    security_token: Optional[str] = None

    # Host only, e.g. "test.salesforce.com"; defaults to login.salesforce.com
    login_host: Optional[str] = None

    # Optional: pre-issued token / instance URL, skips the login call
    access_token: Optional[str] = None
    instance_url: Optional[str] = None

    # Optional: e.g. "58.0"; otherwise the context's version is used
    api_version: Optional[str] = None

    # Seconds, forwarded to requests as the ``timeout`` option
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> SFConfig:
        """Load configuration from environment variables."""
        timeout = os.getenv("SF_TIMEOUT")
        return cls(
            client_id=os.getenv("SF_CLIENT_ID"),
            client_secret=os.getenv("SF_CLIENT_SECRET"),
            username=os.getenv("SF_USERNAME"),
            password=os.getenv("SF_PASSWORD"),
            security_token=os.getenv("SF_SECURITY_TOKEN"),
            login_host=os.getenv("SF_LOGIN_HOST"),
            access_token=os.getenv("SF_ACCESS_TOKEN"),
            instance_url=os.getenv("SF_INSTANCE_URL"),
            api_version=os.getenv("SF_API_VERSION"),
            timeout=float(timeout) if timeout else None,
        )

    def credentials(self) -> Credentials:
        return Credentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            username=self.username,
            password=self.password,
            security_token=self.security_token,
            login_host=self.login_host,
        )

    def missing_credentials(self) -> List[str]:
        """Names of the env vars a password login needs but are unset."""
        required = {
            "SF_CLIENT_ID": self.client_id,
            "SF_CLIENT_SECRET": self.client_secret,
            "SF_USERNAME": self.username,
            "SF_PASSWORD": self.password,
        }
        return [k for k, v in required.items() if not v]

    def preissued_token(self) -> Optional[AuthToken]:
        if self.access_token and self.instance_url:
            return AuthToken(
                access_token=self.access_token,
                instance_url=self.instance_url.rstrip("/"),
            )
        return None

    def transport_options(self) -> Dict[str, Any]:
        return {"timeout": self.timeout} if self.timeout is not None else {}
