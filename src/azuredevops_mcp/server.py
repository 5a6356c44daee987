"""MCP server wiring for Azure DevOps.

Builds the shared UserAgentComposer, TokenBroker and ClientFactory and hands
the three outward callables to the tool registration layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

from azure.core.credentials import AccessToken
from mcp.server.fastmcp import Context, FastMCP

from .auth import AuthSettings, ServerConfig, TokenBroker
from .client import ClientFactory, ClientHandle
from .log import get_logger
from .useragent import UserAgentComposer
from .version import __version__

logger = get_logger(__name__)

SERVER_NAME = "Azure DevOps MCP Server"


@dataclass(frozen=True)
class AzureDevOpsProviders:
    """The callables exposed to tool handlers, and nothing else."""

    get_token: Callable[[], Awaitable[AccessToken]]
    get_client: Callable[[], Awaitable[ClientHandle]]
    get_user_agent: Callable[[], str]


class ToolConfigurator(Protocol):
    def __call__(
        self,
        server: FastMCP,
        providers: AzureDevOpsProviders,
        composer: UserAgentComposer,
    ) -> None: ...


def capture_client_info(ctx: Context, composer: UserAgentComposer) -> None:
    """Copy the client identity from the MCP handshake into ``composer`` once."""
    if composer.client_info_received:
        return
    params = ctx.session.client_params
    info = params.clientInfo if params is not None else None
    composer.append_mcp_client_info(info)
    logger.info("MCP client connected", user_agent=composer.user_agent)


def create_server(
    config: ServerConfig,
    settings: AuthSettings,
    configure_tools: ToolConfigurator | None = None,
) -> tuple[FastMCP, UserAgentComposer]:
    """Build the MCP server and register prompts and tools.

    Args:
        config: Organization and tenant resolved at startup.
        settings: Authentication settings.
        configure_tools: Tool registration callable; defaults to
            :func:`azuredevops_mcp.tools.configure_all_tools`.

    Returns:
        The server and the user agent composer it shares with its tools.
    """
    from .tools import configure_all_tools, configure_prompts

    server = FastMCP(SERVER_NAME)
    # Reported to clients as serverInfo.version during the handshake.
    server._mcp_server.version = __version__
    composer = UserAgentComposer(__version__)
    broker = TokenBroker(settings, tenant_id=config.tenant_id)
    factory = ClientFactory(broker, composer, config.org_url, settings.auth_mode)

    providers = AzureDevOpsProviders(
        get_token=broker,
        get_client=factory,
        get_user_agent=lambda: composer.user_agent,
    )

    configure_prompts(server)
    (configure_tools or configure_all_tools)(server, providers, composer)
    return server, composer
