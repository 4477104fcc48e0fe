"""MCP server exposing the clinical-trial tools.

FHIR url, token and patient id arrive as HTTP headers on each request; they
are read per call and never stored on the server.
"""

from typing import Annotated

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from trialmcp import config
from trialmcp.tools import eligibility, matching
from trialmcp.tools.schema import ToolResponse

logger = structlog.get_logger()

SERVER_NAME = "trialmcp"
SERVER_INSTRUCTIONS = (
    "Tools for finding actively-recruiting clinical trials on ClinicalTrials.gov, "
    "optionally matched to a patient's FHIR demographics."
)


def request_headers(ctx: Context) -> dict[str, str]:
    """Headers of the inbound HTTP request, or {} on transports without one."""
    request = getattr(ctx.request_context, "request", None)
    if request is None:
        return {}
    return {k.lower(): v for k, v in request.headers.items()}


def _to_result(response: ToolResponse) -> str:
    if response.is_error:
        raise ToolError(response.text)
    return response.text


def register_tools(server: FastMCP) -> FastMCP:
    """Attach both trial tools to `server`."""

    @server.tool(name=matching.TOOL_NAME, description=matching.TOOL_DESCRIPTION)
    async def get_matching_clinical_trials(
        ctx: Context,
        patientID: Annotated[str, Field(description="The ID of the patient to find clinical trials for")],
        condition: Annotated[
            str | None,
            Field(description="The clinical trial condition listed in the study (optional)"),
        ] = None,
        location: Annotated[
            str | None, Field(description="The location of the clinical trial (optional)")
        ] = None,
    ) -> str:
        response = await matching.get_matching_clinical_trials(
            patientID, condition, location, headers=request_headers(ctx)
        )
        return _to_result(response)

    @server.tool(name=eligibility.TOOL_NAME, description=eligibility.TOOL_DESCRIPTION)
    async def get_trials_eligibility_ethics_safety(
        condition: Annotated[str, Field(description="The clinical trial condition listed in the study")],
        location: Annotated[
            str | None, Field(description="The location of the clinical trial (optional)")
        ] = None,
        trialId: Annotated[
            str | None, Field(description="Specific NCT ID of a clinical trial (optional)")
        ] = None,
    ) -> str:
        response = await eligibility.get_trials_eligibility_ethics_safety(condition, location, trialId)
        return _to_result(response)

    return server


def create_server(host: str | None = None, port: int | None = None) -> FastMCP:
    server = FastMCP(
        SERVER_NAME,
        instructions=SERVER_INSTRUCTIONS,
        host=host or config.HOST,
        port=port or config.PORT,
    )
    logger.debug("mcp_server_created", host=server.settings.host, port=server.settings.port)
    return register_tools(server)
