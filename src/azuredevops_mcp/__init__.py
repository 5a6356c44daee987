"""Azure DevOps MCP server.

Public API:
- create_server() → (FastMCP, UserAgentComposer)
- TokenBroker, ClientFactory, UserAgentComposer
- AuthSettings, AuthMode (settings)
"""

from .auth import AuthMode, AuthSettings, TokenBroker
from .client import ClientFactory, ClientHandle
from .server import create_server
from .useragent import UserAgentComposer
from .version import __version__

__all__ = [
    "AuthMode",
    "AuthSettings",
    "ClientFactory",
    "ClientHandle",
    "TokenBroker",
    "UserAgentComposer",
    "create_server",
    "__version__",
]
