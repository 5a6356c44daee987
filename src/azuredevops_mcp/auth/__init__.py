"""Authentication helpers for the Azure DevOps API.

Public API:
- TokenBroker (per-call token resolution)
- AuthSettings, AuthMode, OboConfig, ServerConfig (settings)
- build_credential_chain(), apply_token_credentials_selector()
- AZURE_DEVOPS_SCOPE (constant), org_url_from_name() (URL helper)
"""

from .broker import TokenBroker
from .chain import apply_token_credentials_selector, build_credential_chain
from .config import AuthMode, AuthSettings, OboConfig, ServerConfig
from .scopes import AZURE_DEVOPS_SCOPE, org_url_from_name

__all__ = [
    "AuthMode",
    "AuthSettings",
    "OboConfig",
    "ServerConfig",
    "TokenBroker",
    "apply_token_credentials_selector",
    "build_credential_chain",
    "AZURE_DEVOPS_SCOPE",
    "org_url_from_name",
]
