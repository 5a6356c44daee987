"""Command line entry point for the Azure DevOps MCP server.

Usage:
    mcp-server-azuredevops contoso
    mcp-server-azuredevops contoso --tenant <tenant-id>
    ADO_ORG=contoso mcp-server-azuredevops
"""

from __future__ import annotations

import asyncio
import sys

import click

from .auth import AuthSettings, ServerConfig
from .errors import ConfigurationError
from .log import get_logger, setup_logging
from .server import create_server
from .version import __version__

logger = get_logger(__name__)


async def _run(config: ServerConfig, settings: AuthSettings) -> None:
    server, _ = create_server(config, settings)
    logger.info("Connecting stdio server", org_url=config.org_url)
    await server.run_stdio_async()
    logger.info("Server closed")
@click.command(name="mcp-server-azuredevops")
@click.argument("organization", required=False)
@click.option(
    "--tenant",
    "-t",
    default=None,
    help="Azure tenant ID (optional, required for multi-tenant scenarios)",
)
@click.version_option(__version__, prog_name="mcp-server-azuredevops")
def main(organization: str | None, tenant: str | None) -> None:
    """Azure DevOps MCP Server for ORGANIZATION (falls back to ADO_ORG)."""
    settings = AuthSettings()
    setup_logging(settings.log_level, settings.log_format)

    try:
        config = ServerConfig.resolve(organization, settings, tenant_id=tenant)
    except ConfigurationError as e:
        logger.error("Fatal error in main()", error=e.message, details=e.details)
        sys.exit(1)

    try:
        asyncio.run(_run(config, settings))
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    main()
