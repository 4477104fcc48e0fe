"""CLI entry point for trialmcp."""

import click
from dotenv import load_dotenv

load_dotenv()

from trialmcp.cli.commands import eligibility_cmd, matching_cmd, serve_cmd  # noqa: E402


@click.group()
def main():
    """Clinical-trial search tools for LLM agents (MCP server + local runs)."""
    pass


main.add_command(serve_cmd)
main.add_command(eligibility_cmd)
main.add_command(matching_cmd)
