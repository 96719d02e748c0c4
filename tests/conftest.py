import json

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from sfrest.models import AuthToken, Credentials
from sfrest.state import DEFAULT_API_VERSION, default_context


@pytest.fixture(autouse=True)
def reset_default_context():
    """Every test starts and ends with a pristine shared context."""
    default_context.set_version(DEFAULT_API_VERSION)
    default_context.record_limit_info({})
    yield
    default_context.set_version(DEFAULT_API_VERSION)
    default_context.record_limit_info({})


@pytest.fixture
def token():
    return AuthToken(access_token="my_token", instance_url="https://salesforce.localhost")


@pytest.fixture
def credentials():
    return Credentials(
        client_id="my-ID",
        client_secret="my-SECRET",
        username="my-USERNAME",
        password="my-PASSWORD",
        security_token="my-TOKEN",
    )


@pytest.fixture
def make_response():
    """Build a real requests.Response with the given JSON body and headers."""

    def _make(status_code=200, json_data=None, headers=None, body=None):
        resp = requests.Response()
        resp.status_code = status_code
        if body is None:
            body = json.dumps(json_data).encode("utf-8") if json_data is not None else b""
        resp._content = body
        resp.headers = CaseInsensitiveDict(headers or {})
        resp.encoding = "utf-8"
        resp.url = "https://salesforce.localhost"
        return resp

    return _make
