from __future__ import annotations

import os
from typing import Final, Sequence

from azure.core.credentials_async import AsyncTokenCredential
from azure.identity.aio import (
    AzureCliCredential,
    ChainedTokenCredential,
    DefaultAzureCredential,
    OnBehalfOfCredential,
)

from azuredevops_mcp.log import get_logger

from .config import OboConfig

logger = get_logger(__name__)

TOKEN_CREDENTIALS_ENV: Final[str] = "AZURE_TOKEN_CREDENTIALS"
DEFAULT_TOKEN_CREDENTIALS: Final[str] = "dev"


def apply_token_credentials_selector(override: str | None = None) -> str:
    """Pin the credential types DefaultAzureCredential is allowed to try.

    azure-identity reads ``AZURE_TOKEN_CREDENTIALS`` from the environment and
    offers no constructor argument for it, so the value is written to
    ``os.environ``. Must run before any credential object is built.

    Args:
        override: Operator supplied selector (ADO_MCP_AZURE_TOKEN_CREDENTIALS).

    Returns:
        The value that was set.
    """
    value = override or DEFAULT_TOKEN_CREDENTIALS
    os.environ[TOKEN_CREDENTIALS_ENV] = value
    logger.debug("Credential selector applied", env=TOKEN_CREDENTIALS_ENV, value=value)
    return value


def build_credential_chain(tenant_id: str | None = None) -> list[AsyncTokenCredential]:
    """Return the credentials to try, most specific first.

    Args:
        tenant_id: When set, an Azure CLI credential scoped to this tenant is
            placed ahead of the default credential.

    Returns:
        An ordered list of async credentials.
    """
    credentials: list[AsyncTokenCredential] = []
    if tenant_id:
        credentials.append(AzureCliCredential(tenant_id=tenant_id))
    credentials.append(DefaultAzureCredential())
    return credentials


def chain_credential(credentials: Sequence[AsyncTokenCredential]) -> AsyncTokenCredential:
    """Collapse an ordered list into one credential."""
    if not credentials:
        raise ValueError("At least one credential is required.")
    if len(credentials) == 1:
        return credentials[0]
    return ChainedTokenCredential(*credentials)


def build_obo_credential(config: OboConfig) -> AsyncTokenCredential:
    return OnBehalfOfCredential(
        tenant_id=config.tenant_id,
        client_id=config.client_id,
        client_secret=config.client_secret.get_secret_value(),
        user_assertion=config.user_assertion.get_secret_value(),
    )
