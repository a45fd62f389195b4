from __future__ import annotations

import json
import logging
import sys
from typing import Any, NoReturn, Optional

import click
from pydantic import BaseModel

from . import __version__
from .api import SalesforceClient
from .config import SFConfig, build_authenticator
from .exceptions import ApiFailureError, LoginFailureError, SalesforceError, UnexpectedBodyError
from .logging_config import configure_logging

_logger = logging.getLogger(__name__)


def _to_jsonable(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True, mode="json")
    return obj


def _echo_json(obj: Any, pretty: bool) -> None:
    click.echo(json.dumps(_to_jsonable(obj), indent=2 if pretty else None, default=str))


def _fail(e: SalesforceError) -> NoReturn:
    """Print a one-line reason (plus API error codes) and abort."""
    click.echo(f"❌  {e}", err=True)
    if isinstance(e, ApiFailureError):
        for err in e.errors:
            click.echo(f"   {err.error_code}: {err.message}", err=True)
    elif isinstance(e, LoginFailureError) and e.response.body is not None:
        body = e.response.body
        click.echo(f"   {body.error}: {body.error_description}", err=True)
    elif isinstance(e, UnexpectedBodyError):
        click.echo(f"   body: {e.body[:500]}", err=True)
    raise click.Abort() from None


def _connect() -> SalesforceClient:
    return SalesforceClient.from_config(SFConfig.from_env())


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sfclient")
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
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int]) -> None:
    """Salesforce REST client. Credentials come from SALESFORCE_* env vars or .env."""
    configure_logging(loglevel)
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("whoami")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_whoami(pretty: bool) -> None:
    """Show the userinfo of the authenticated user."""
    try:
        info = build_authenticator(SFConfig.from_env()).user_info()
    except SalesforceError as e:
        _fail(e)
    _echo_json(info, pretty)


@cli.command("describe")
@click.argument("name", required=False)
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_describe(name: Optional[str], pretty: bool) -> None:
    """Describe one sObject, or list all of them when NAME is omitted."""
    try:
        client = _connect()
        if name:
            _echo_json(client.describe_object(name).body, pretty)
        else:
            body = client.describe_objects().body
            for obj in body.sobjects if body else []:
                click.echo(f"{obj.name}\t{obj.label}")
    except SalesforceError as e:
        _fail(e)


@cli.command("get")
@click.argument("name")
@click.argument("record_id")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_get(name: str, record_id: str, pretty: bool) -> None:
    """Fetch a single record by Id."""
    try:
        _echo_json(_connect().get_object(name, record_id).body, pretty)
    except SalesforceError as e:
        _fail(e)


@cli.command("query")
@click.argument("soql")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_query(soql: str, pretty: bool) -> None:
    """Run a SOQL query and print the first page of results."""
    try:
        _echo_json(_connect().query(soql).body, pretty)
    except SalesforceError as e:
        _fail(e)


@cli.command("delete")
@click.argument("name")
@click.argument("record_id")
def cmd_delete(name: str, record_id: str) -> None:
    """Delete a record by Id."""
    try:
        _connect().delete_object(name, record_id)
    except SalesforceError as e:
        _fail(e)
    click.echo(f"✅  Deleted {name} {record_id}")


def _configure_stdio() -> None:
    # Force UTF-8 output and never crash on unencodable chars.
    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding="utf-8", errors="backslashreplace")


def main() -> None:
    _configure_stdio()
    cli()
