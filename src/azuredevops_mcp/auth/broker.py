from __future__ import annotations

from azure.core.credentials import AccessToken
from azure.core.credentials_async import AsyncTokenCredential

from azuredevops_mcp.errors import AuthenticationError
from azuredevops_mcp.log import get_logger

from . import chain
from .config import AuthMode, AuthSettings
from .scopes import AZURE_DEVOPS_SCOPE

logger = get_logger(__name__)


class TokenBroker:
    """Resolve a bearer token for Azure DevOps on every call.

    Nothing is cached: each call builds its credential, asks it for a token
    and closes it again, so an expired token is handled by calling again.
    Concurrent calls share no state.
    """

    def __init__(self, settings: AuthSettings, tenant_id: str | None = None) -> None:
        """Initialize the broker.

        Args:
            settings: Authentication settings read at startup.
            tenant_id: Tenant passed on the command line, if any.
        """
        self._settings = settings
        self._tenant_id = tenant_id

    @property
    def auth_mode(self) -> AuthMode:
        return self._settings.auth_mode

    async def __call__(self) -> AccessToken:
        return await self.resolve_token()

    async def resolve_token(self) -> AccessToken:
        """Return a fresh access token for the Azure DevOps resource scope.

        Raises:
            ConfigurationError: If on-behalf-of mode is missing an input.
            AuthenticationError: If the identity provider returns no token.
        """
        chain.apply_token_credentials_selector(self._settings.token_credentials)
        if self._settings.auth_mode is AuthMode.ON_BEHALF_OF:
            return await self._resolve_on_behalf_of()
        return await self._resolve_default()

    async def _resolve_on_behalf_of(self) -> AccessToken:
        s = self._settings
        logger.info(
            "Starting on-behalf-of token acquisition",
            has_user_assertion=bool(s.user_assertion),
            has_tenant=bool(s.tenant_id or self._tenant_id),
            has_client_id=bool(s.client_id),
            has_client_secret=bool(s.client_secret),
        )
        config = s.obo_config(tenant_fallback=self._tenant_id)

        credential = chain.build_obo_credential(config)
        token = await self._request_token(credential)
        if token is None:
            logger.error("On-behalf-of flow returned no token", tenant_id=config.tenant_id)
            raise AuthenticationError(
                "On-behalf-of flow failed to acquire Azure DevOps token."
            )
        logger.info("On-behalf-of token acquired", expires_on=token.expires_on)
        return token

    async def _resolve_default(self) -> AccessToken:
        tenant_id = self._settings.default_tenant(self._tenant_id)
        credential = chain.chain_credential(chain.build_credential_chain(tenant_id))
        token = await self._request_token(credential)
        if token is None:
            raise AuthenticationError(
                "Failed to obtain Azure DevOps token. Ensure you have Azure CLI "
                "logged in or another token source setup correctly.",
                details={"tenant_id": tenant_id},
            )
        logger.debug("Token acquired", expires_on=token.expires_on)
        return token

    @staticmethod
    async def _request_token(credential: AsyncTokenCredential) -> AccessToken | None:
        """Ask ``credential`` for a token and close it afterwards."""
        async with credential:
            token = await credential.get_token(AZURE_DEVOPS_SCOPE)
        if not token or not token.token:
            return None
        return token
