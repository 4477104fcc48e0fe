"""Unit tests for the trialmcp CLI."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from trialmcp.cli import main
from trialmcp.tools.schema import ToolResponse


def test_cli_lists_commands():
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    for name in ("serve", "eligibility", "matching"):
        assert name in result.output


def test_eligibility_command_prints_text():
    handler = AsyncMock(return_value=ToolResponse(text="Filtered Clinical Trials"))
    with (
        patch("trialmcp.cli.commands.get_trials_eligibility_ethics_safety", new=handler),
        patch("trialmcp.cli.commands.configure_logging"),
    ):
        result = CliRunner().invoke(
            main, ["eligibility", "--condition", "lung cancer", "--trial-id", "NCT05456256"]
        )
    assert result.exit_code == 0
    assert "Filtered Clinical Trials" in result.output
    handler.assert_awaited_once_with("lung cancer", None, "NCT05456256")


def test_matching_command_passes_fhir_headers():
    handler = AsyncMock(return_value=ToolResponse(text="Clinical trials that Jane Doe fits"))
    with (
        patch("trialmcp.cli.commands.get_matching_clinical_trials", new=handler),
        patch("trialmcp.cli.commands.configure_logging"),
    ):
        result = CliRunner().invoke(
            main,
            ["matching", "--patient-id", "pat-1", "--fhir-url", "https://fhir.example", "--fhir-token", "tok"],
        )
    assert result.exit_code == 0
    headers = handler.call_args[1]["headers"]
    assert headers == {"x-fhir-server-url": "https://fhir.example", "x-fhir-access-token": "tok"}


def test_error_response_exits_nonzero():
    handler = AsyncMock(return_value=ToolResponse(text="An error occurred", is_error=True))
    with (
        patch("trialmcp.cli.commands.get_trials_eligibility_ethics_safety", new=handler),
        patch("trialmcp.cli.commands.configure_logging"),
    ):
        result = CliRunner().invoke(main, ["eligibility", "--condition", "asthma"])
    assert result.exit_code == 1


def test_serve_runs_server_with_transport():
    server = MagicMock()
    with (
        patch("trialmcp.server.create_server", return_value=server) as create,
        patch("trialmcp.cli.commands.configure_logging"),
    ):
        result = CliRunner().invoke(main, ["serve", "--transport", "stdio", "--port", "9001"])
    assert result.exit_code == 0
    create.assert_called_once_with(host=None, port=9001)
    server.run.assert_called_once_with(transport="stdio")
