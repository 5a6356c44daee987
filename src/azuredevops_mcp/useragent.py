from __future__ import annotations

from typing import Final, Protocol

from .log import get_logger

logger = get_logger(__name__)

PRODUCT_NAME: Final[str] = "AzureDevOps.MCP"


class ClientInfo(Protocol):
    """Anything exposing ``name`` and ``version``, e.g. ``mcp.types.Implementation``."""

    name: str
    version: str


class UserAgentComposer:
    """Build the user agent string sent with every Azure DevOps request.

    One instance is created at startup and shared by reference. It starts
    with the server's own version and learns the connecting MCP client's
    name and version once, after the handshake.
    """

    def __init__(self, base_version: str, product: str = PRODUCT_NAME) -> None:
        self._product = product
        self._base_version = base_version
        self._client_info: tuple[str, str] | None = None
        self._appended = False

    @property
    def client_info_received(self) -> bool:
        """True once the handshake was processed, even if it carried no client info."""
        return self._appended

    @property
    def user_agent(self) -> str:
        agent = f"{self._product}/{self._base_version}"
        if self._client_info is not None:
            name, version = self._client_info
            agent = f"{agent} {name}/{version}"
        return agent

    def append_mcp_client_info(self, info: ClientInfo | None) -> None:
        """Record the connecting client's identity.

        Only the first call has an effect; ``None`` is accepted and leaves
        the user agent at the base version.
        """
        if self._appended:
            logger.debug("MCP client info already recorded, ignoring")
            return
        self._appended = True
        if info is not None:
            self._client_info = (info.name, info.version)
