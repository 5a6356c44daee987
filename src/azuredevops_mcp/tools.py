import asyncio
import json

from mcp.server.fastmcp import Context, FastMCP

from .server import AzureDevOpsProviders, capture_client_info
from .useragent import UserAgentComposer


def configure_prompts(server: FastMCP) -> None:
    @server.prompt(name="Projects", description="Lists all projects in the Azure DevOps organization.")
    def projects_prompt() -> str:
        return "List all projects in my Azure DevOps organization using the core_list_projects tool."


def configure_all_tools(
    server: FastMCP,
    providers: AzureDevOpsProviders,
    composer: UserAgentComposer,
) -> None:
    """Register the Azure DevOps tools on ``server``."""

    @server.tool(
        name="core_list_projects",
        description="Retrieve a list of projects in your Azure DevOps organization.",
    )
    async def core_list_projects(ctx: Context, top: int | None = None) -> str:
        capture_client_info(ctx, composer)
        handle = await providers.get_client()
        core_client = handle.connection.clients.get_core_client()
        result = await asyncio.to_thread(core_client.get_projects, top=top)
        # 7.x clients wrap the list in a paged response.
        projects = getattr(result, "value", result) or []
        return json.dumps(
            [{"id": p.id, "name": p.name, "state": p.state} for p in projects],
            indent=2,
        )
