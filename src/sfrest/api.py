from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

import requests

from . import resources
from .config import SFConfig
from .env_loader import load_env_files
from .exceptions import MissingCredentialsError, NotConnectedError
from .models import AuthToken, Credentials, RequestDescriptor, ResponseEnvelope
from .perform import perform_request
from .prepare import auth_prepare
from .state import ApiContext, default_context

__author__ = "Kevin Steptoe"
__copyright__ = "Kevin Steptoe"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

Options = Optional[Mapping[str, Any]]


# ----------------------------------------------------------------------
# Module-level calls on the shared context
# ----------------------------------------------------------------------
def auth(
    credentials: Credentials,
    options: Options = None,
    *,
    session: Optional[requests.Session] = None,
) -> ResponseEnvelope:
    """Log in with the username/password flow.

    ``api_result`` is the token payload (``access_token``, ``instance_url``,
    ``id``, ``issued_at``, ``signature``); use :meth:`AuthToken.from_payload`
    to turn it into a token.
    """
    _logger.debug("Requesting access token for %s", credentials.username)
    return perform_request(auth_prepare(credentials, options), session=session)


def soql(
    query: str,
    token: AuthToken,
    options: Options = None,
    *,
    session: Optional[requests.Session] = None,
) -> ResponseEnvelope:
    """Run a SOQL query with the shared context's API version."""
    return perform_request(resources.soql_prepare(query, token, options), session=session)


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class SalesforceAPI:
    """Salesforce REST client bound to one token, session and :class:`ApiContext`.

    Each call prepares a request with :mod:`sfrest.resources`, executes it
    and returns the :class:`ResponseEnvelope`.
    """

    def __init__(
        self,
        cfg: Optional[SFConfig] = None,
        *,
        session: Optional[requests.Session] = None,
        context: Optional[ApiContext] = None,
    ) -> None:
        if cfg is None:
            load_env_files()
            cfg = SFConfig.from_env()
        self.cfg = cfg
        self.session = session or requests.Session()
        if context is None:
            # A pinned version gets its own context so the shared one is untouched
            context = ApiContext(cfg.api_version) if cfg.api_version else default_context
        self.context = context
        self.token: Optional[AuthToken] = None

    # --------------------------- Connection ---------------------------

    def connect(self) -> AuthToken:
        """Use the configured token, or log in with the configured credentials."""
        token = self.cfg.preissued_token()
        if token is not None:
            _logger.debug("Using existing access token from configuration.")
        else:
            missing = self.cfg.missing_credentials()
            if missing:
                raise MissingCredentialsError(missing)
            _logger.info("Performing OAuth password login as %s", self.cfg.username)
            envelope = auth(self.cfg.credentials(), self._options(), session=self.session)
            token = AuthToken.from_payload(envelope.api_result)

        self.token = token
        _logger.info(
            "Connected to Salesforce instance=%s api=v%s",
            token.instance_url,
            self.context.version,
        )
        return token

    def read_limit_info(self) -> Dict[str, int]:
        """Usage reported by the most recent response on this client's context."""
        return self.context.read_limit_info()

    # --------------------------- Resources ----------------------------

    def resources(self, options: Options = None) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(resources.resources_prepare(self._token(), opts, context=self.context))

    def objects(self, options: Options = None) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(resources.objects_prepare(self._token(), opts, context=self.context))

    def sobject(self, sobject: str, options: Options = None) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(
            resources.sobject_prepare(sobject, self._token(), opts, context=self.context)
        )

    def recent(self, sobject: str, options: Options = None) -> ResponseEnvelope:
        """Recently viewed records of ``sobject``, taken from its ``recentItems``."""
        envelope = self.sobject(sobject, options)
        return ResponseEnvelope(
            api_result=(envelope.api_result or {}).get("recentItems", []),
            limit_info=envelope.limit_info,
        )

    def describe(self, sobject: str, options: Options = None) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(
            resources.describe_prepare(sobject, self._token(), opts, context=self.context)
        )

    def get(
        self,
        sobject: str,
        identifier: str,
        fields: Optional[Sequence[str]] = None,
        options: Options = None,
    ) -> ResponseEnvelope:
        """Fetch a record; with ``fields`` only those fields, minus ``attributes``."""
        opts = self._options(options)
        envelope = self._run(
            resources.get_prepare(
                sobject, identifier, self._token(), fields, opts, context=self.context
            )
        )
        if fields is not None and isinstance(envelope.api_result, dict):
            envelope.api_result.pop("attributes", None)
        return envelope

    def create(
        self, sobject: str, record: Mapping[str, Any], options: Options = None
    ) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(
            resources.create_prepare(sobject, record, self._token(), opts, context=self.context)
        )

    def update(
        self,
        sobject: str,
        identifier: str,
        record: Mapping[str, Any],
        options: Options = None,
    ) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(
            resources.update_prepare(
                sobject, identifier, record, self._token(), opts, context=self.context
            )
        )

    def delete(self, sobject: str, identifier: str, options: Options = None) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(
            resources.delete_prepare(sobject, identifier, self._token(), opts, context=self.context)
        )

    def flow(
        self, name: str, data: Optional[Mapping[str, Any]] = None, options: Options = None
    ) -> ResponseEnvelope:
        """Invoke the autolaunched flow ``name`` with ``data`` (default ``{"inputs": []}``)."""
        opts = self._options(options)
        return self._run(
            resources.flow_prepare(name, self._token(), data, opts, context=self.context)
        )

    def soql(self, query: str, options: Options = None) -> ResponseEnvelope:
        opts = self._options(options)
        return self._run(resources.soql_prepare(query, self._token(), opts, context=self.context))

    # --------------------------- Internal helpers --------------------

    def _token(self) -> AuthToken:
        if self.token is None:
            raise NotConnectedError()
        return self.token

    def _options(self, options: Options = None) -> Dict[str, Any]:
        """Configured transport options overlaid with per-call ones."""
        merged = self.cfg.transport_options()
        merged.update(options or {})
        return merged

    def _run(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        return perform_request(descriptor, session=self.session, context=self.context)
