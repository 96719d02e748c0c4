from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

import click

from . import __version__
from .api import SalesforceAPI
from .config import SFConfig
from .env_loader import load_env_files
from .exceptions import MissingCredentialsError, SalesforceError
from .logging_config import configure_logging
from .models import ResponseEnvelope
from .versions import all_versions, latest_version

_logger = logging.getLogger(__name__)

# Load .env very early, so everything else sees env vars
load_env_files()

_MISSING_HELP = (
    "Set these environment variables (or create a .env file):\n"
    "  SF_CLIENT_ID=...        # Connected App Consumer Key\n"
    "  SF_CLIENT_SECRET=...    # Connected App Consumer Secret\n"
    "  SF_USERNAME=...\n"
    "  SF_PASSWORD=...\n"
    "  SF_SECURITY_TOKEN=...   # optional when logging in from a trusted IP range\n"
    "  SF_LOGIN_HOST=test.salesforce.com  # optional; sandboxes only\n"
    "  SF_API_VERSION=58.0     # optional; default 39.0"
)


def _connect(ctx: click.Context) -> SalesforceAPI:
    cfg = SFConfig.from_env()
    if ctx.obj.get("api_version"):
        cfg.api_version = ctx.obj["api_version"]
    api = SalesforceAPI(cfg)
    try:
        api.connect()
    except MissingCredentialsError as e:
        needed = ", ".join(e.missing)
        msg = f"Missing Salesforce credentials: {needed}\n\n{_MISSING_HELP}"
        raise click.ClickException(msg) from e
    except SalesforceError as e:
        raise click.ClickException(f"Login failed: {e}") from e
    return api


def _echo_json(data: Any, pretty: bool) -> None:
    click.echo(json.dumps(data, indent=2 if pretty else None))


def _echo_envelope(envelope: ResponseEnvelope, pretty: bool) -> None:
    _echo_json(envelope.api_result, pretty)
    info = envelope.limit_info
    if info:
        click.echo(f"API usage: {info['used']}/{info['available']}", err=True)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sfrest")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.option("--api-version", default=None, help="REST API version, e.g. 58.0.")
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int], api_version: Optional[str]) -> None:
    """Salesforce REST API from the command line."""
    configure_logging(loglevel)
    _logger.debug("CLI start, version=%s", __version__)
    ctx.ensure_object(dict)
    ctx.obj["api_version"] = api_version
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("login")
@click.pass_context
def cmd_login(ctx: click.Context) -> None:
    """Log in and show the instance URL."""
    api = _connect(ctx)
    token = api.token
    click.echo(f"Instance URL: {token.instance_url}")
    click.echo(f"API Version: v{api.context.version}")
    click.echo(f"Token preview: {token.access_token[:10]}...{token.access_token[-6:]}")


@cli.command("query")
@click.argument("soql")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
@click.pass_context
def cmd_query(ctx: click.Context, soql: str, pretty: bool) -> None:
    """Run a SOQL query, e.g. "SELECT Id, Name FROM Account LIMIT 5"."""
    api = _connect(ctx)
    try:
        envelope = api.soql(soql)
    except SalesforceError as e:
        raise click.ClickException(str(e)) from e
    _echo_envelope(envelope, pretty)


@cli.command("get")
@click.argument("sobject")
@click.argument("identifier")
@click.option("-f", "--field", "fields", multiple=True, help="Only fetch this field (repeatable).")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
@click.pass_context
def cmd_get(
    ctx: click.Context, sobject: str, identifier: str, fields: Tuple[str, ...], pretty: bool
) -> None:
    """Fetch one record by Id."""
    api = _connect(ctx)
    try:
        envelope = api.get(sobject, identifier, list(fields) if fields else None)
    except SalesforceError as e:
        raise click.ClickException(str(e)) from e
    _echo_envelope(envelope, pretty)


@cli.command("describe")
@click.argument("sobject")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
@click.pass_context
def cmd_describe(ctx: click.Context, sobject: str, pretty: bool) -> None:
    """Describe an sObject type."""
    api = _connect(ctx)
    try:
        envelope = api.describe(sobject)
    except SalesforceError as e:
        raise click.ClickException(str(e)) from e
    _echo_envelope(envelope, pretty)


@cli.command("versions")
@click.option("--latest", is_flag=True, help="Only print the latest version.")
def cmd_versions(latest: bool) -> None:
    """List the REST API versions Salesforce offers (no login needed)."""
    try:
        if latest:
            click.echo(latest_version())
            return
        versions = all_versions()
    except SalesforceError as e:
        raise click.ClickException(str(e)) from e
    for v in versions:
        click.echo(f"{v['version']}\t{v.get('label', '')}")
