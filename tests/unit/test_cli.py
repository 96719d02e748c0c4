import json

import pytest
from click.testing import CliRunner

from sfrest.cli import cli
from sfrest.exceptions import MissingCredentialsError, SalesforceHTTPError
from sfrest.models import AuthToken, ResponseEnvelope


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def dummy_api(monkeypatch):
    """Replace SalesforceAPI in the CLI so no network calls occur."""

    class DummyContext:
        version = "39.0"

    class DummyAPI:
        instances = []

        def __init__(self, cfg):
            self.cfg = cfg
            self.context = DummyContext()
            self.token = None
            self.calls = []
            DummyAPI.instances.append(self)

        def connect(self):
            self.token = AuthToken(
                access_token="00DFAKE-TOKEN-1234567890",
                instance_url="https://example.my.salesforce.com",
            )
            return self.token

        def soql(self, query):
            self.calls.append(("soql", query))
            return ResponseEnvelope(
                api_result={"totalSize": 1, "done": True, "records": [{"Name": "Acme Corp"}]},
                limit_info={"used": 12, "available": 15000},
            )

        def get(self, sobject, identifier, fields=None):
            self.calls.append(("get", sobject, identifier, fields))
            return ResponseEnvelope(api_result={"Name": "Acme Corp"})

        def describe(self, sobject):
            if sobject == "Nope":
                raise SalesforceHTTPError(404, "https://x", [{"errorCode": "NOT_FOUND"}])
            return ResponseEnvelope(api_result={"name": sobject})

    monkeypatch.setattr("sfrest.cli.SalesforceAPI", DummyAPI)
    return DummyAPI


def test_cli_help_shows_usage(runner):
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Salesforce REST API" in result.output
    for name in ("login", "query", "get", "describe", "versions"):
        assert name in result.output


def test_cli_version_option(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "sfrest" in result.output.lower()


def test_login(runner, dummy_api):
    result = runner.invoke(cli, ["login"])

    assert result.exit_code == 0
    assert "Instance URL: https://example.my.salesforce.com" in result.output
    assert "API Version: v39.0" in result.output
    assert "00DFAKE-TO...567890" in result.output


def test_login_missing_credentials(runner, monkeypatch):
    class FailingAPI:
        def __init__(self, cfg):
            pass

        def connect(self):
            raise MissingCredentialsError(["SF_CLIENT_ID", "SF_PASSWORD"])

    monkeypatch.setattr("sfrest.cli.SalesforceAPI", FailingAPI)

    result = runner.invoke(cli, ["login"])

    assert result.exit_code == 1
    assert "Missing Salesforce credentials: SF_CLIENT_ID, SF_PASSWORD" in result.output


def test_query_prints_json(runner, dummy_api):
    result = runner.invoke(cli, ["query", "SELECT Name FROM Account LIMIT 1"])

    assert result.exit_code == 0
    # JSON first; the usage line follows on stderr
    data = json.loads(result.output.splitlines()[0])
    assert data["records"][0]["Name"] == "Acme Corp"
    assert dummy_api.instances[-1].calls == [("soql", "SELECT Name FROM Account LIMIT 1")]


def test_query_pretty_print(runner, dummy_api):
    result = runner.invoke(cli, ["query", "--pretty", "SELECT Id FROM Account"])

    assert result.exit_code == 0
    assert "{\n  " in result.output


def test_api_version_option_reaches_config(runner, dummy_api):
    result = runner.invoke(cli, ["--api-version", "58.0", "query", "SELECT Id FROM Account"])

    assert result.exit_code == 0
    assert dummy_api.instances[-1].cfg.api_version == "58.0"


def test_get_with_fields(runner, dummy_api):
    result = runner.invoke(cli, ["get", "Account", "001", "-f", "Name", "--field", "Website"])

    assert result.exit_code == 0
    assert dummy_api.instances[-1].calls == [("get", "Account", "001", ["Name", "Website"])]


def test_get_without_fields(runner, dummy_api):
    result = runner.invoke(cli, ["get", "Account", "001"])

    assert result.exit_code == 0
    assert dummy_api.instances[-1].calls == [("get", "Account", "001", None)]


def test_describe_error_exits_nonzero(runner, dummy_api):
    result = runner.invoke(cli, ["describe", "Nope"])

    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_versions(runner, monkeypatch):
    monkeypatch.setattr(
        "sfrest.cli.all_versions",
        lambda: [
            {"label": "Spring '17", "version": "39.0"},
            {"label": "Summer '19", "version": "46.0"},
        ],
    )

    result = runner.invoke(cli, ["versions"])

    assert result.exit_code == 0
    assert "39.0\tSpring '17" in result.output
    assert "46.0\tSummer '19" in result.output


def test_versions_latest(runner, monkeypatch):
    monkeypatch.setattr("sfrest.cli.latest_version", lambda: "46.0")

    result = runner.invoke(cli, ["versions", "--latest"])

    assert result.exit_code == 0
    assert result.output.strip() == "46.0"
