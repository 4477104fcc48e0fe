"""CLI commands: run the MCP server, or invoke a tool once from the shell."""

from __future__ import annotations

import asyncio
import sys

import click
import structlog

from trialmcp import config
from trialmcp.fhir.context import FHIR_ACCESS_TOKEN_HEADER, FHIR_SERVER_URL_HEADER
from trialmcp.logging_setup import configure_logging
from trialmcp.tools import get_matching_clinical_trials, get_trials_eligibility_ethics_safety
from trialmcp.tools.schema import ToolResponse

logger = structlog.get_logger()

_TRANSPORTS = ("streamable-http", "sse", "stdio")


def _emit(response: ToolResponse) -> None:
    click.echo(response.text, err=response.is_error)
    if response.is_error:
        sys.exit(1)


@click.command("serve")
@click.option("--transport", type=click.Choice(_TRANSPORTS), default="streamable-http", show_default=True)
@click.option("--host", default=None, help=f"Bind address (default: {config.HOST})")
@click.option("--port", type=int, default=None, help=f"Bind port (default: {config.PORT})")
@click.option("--log-level", default=config.LOG_LEVEL, show_default=True)
def serve_cmd(transport: str, host: str | None, port: int | None, log_level: str):
    """Run the MCP server exposing both trial tools."""
    from trialmcp.server import create_server

    configure_logging(log_level)
    server = create_server(host=host, port=port)
    logger.info(
        "mcp_server_starting",
        transport=transport,
        host=server.settings.host,
        port=server.settings.port,
    )
    server.run(transport=transport)


@click.command("eligibility")
@click.option("--condition", required=True, help="Condition listed in the study, e.g. 'lung cancer'")
@click.option("--location", default=None, help="City, state or country")
@click.option("--trial-id", default=None, help="NCT ID matched as free text")
@click.option("--log-level", default=config.LOG_LEVEL, show_default=True)
def eligibility_cmd(condition: str, location: str | None, trial_id: str | None, log_level: str):
    """Print the eligibility/safety/ethics review for recruiting trials."""
    configure_logging(log_level)
    response = asyncio.run(get_trials_eligibility_ethics_safety(condition, location, trial_id))
    _emit(response)


@click.command("matching")
@click.option("--patient-id", required=True, help="FHIR Patient id")
@click.option("--fhir-url", envvar="FHIR_SERVER_URL", default="", help="FHIR base URL")
@click.option("--fhir-token", envvar="FHIR_ACCESS_TOKEN", default="", help="FHIR bearer token")
@click.option("--condition", default=None)
@click.option("--location", default=None)
@click.option("--log-level", default=config.LOG_LEVEL, show_default=True)
def matching_cmd(
    patient_id: str,
    fhir_url: str,
    fhir_token: str,
    condition: str | None,
    location: str | None,
    log_level: str,
):
    """Print recruiting trials matching a FHIR patient's age and sex."""
    configure_logging(log_level)
    headers = {FHIR_SERVER_URL_HEADER: fhir_url, FHIR_ACCESS_TOKEN_HEADER: fhir_token}
    response = asyncio.run(
        get_matching_clinical_trials(patient_id, condition, location, headers=headers)
    )
    _emit(response)
