from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from azure.core.credentials import AccessToken
from azure.devops.connection import Connection
from msrest.authentication import BasicTokenAuthentication

from .auth.config import AuthMode
from .log import get_logger
from .useragent import PRODUCT_NAME, UserAgentComposer
from .version import __version__

logger = get_logger(__name__)

TokenProvider = Callable[[], Awaitable[AccessToken]]


@dataclass(frozen=True)
class ClientHandle:
    """An authenticated Azure DevOps connection and the metadata it was built with."""

    connection: Any
    org_url: str
    product_name: str
    product_version: str
    user_agent: str


def get_bearer_handler(token: str) -> BasicTokenAuthentication:
    """Wrap a raw access token so msrest sends it as ``Authorization: Bearer``."""
    return BasicTokenAuthentication({"access_token": token})


class ClientFactory:
    """Create a fresh, authenticated Azure DevOps client per call.

    Args:
        token_provider: Zero-argument coroutine function returning an
            ``AccessToken`` (normally a :class:`TokenBroker`).
        user_agent: Shared composer, read at construction time.
        org_url: Organization URL, e.g. ``https://dev.azure.com/contoso``.
        auth_mode: Selects the direct bearer-token constructor when the SDK has one.
        connection_cls: Connection class to build; ``Connection`` by default.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        user_agent: UserAgentComposer,
        org_url: str,
        auth_mode: AuthMode = AuthMode.DEFAULT,
        *,
        connection_cls: type = Connection,
    ) -> None:
        self._token_provider = token_provider
        self._user_agent = user_agent
        self._org_url = org_url
        self._auth_mode = auth_mode
        self._connection_cls = connection_cls

    @property
    def org_url(self) -> str:
        return self._org_url

    async def __call__(self) -> ClientHandle:
        return await self.build_client()

    async def build_client(self) -> ClientHandle:
        """Resolve a token and build a connection around it.

        Errors from the token provider propagate unchanged; nothing is retried.
        """
        token = await self._token_provider()
        user_agent = self._user_agent.user_agent

        # TODO: confirm whether falling back to the bearer handler in OBO mode is
        # still needed once every supported azure-devops release exposes
        # create_with_bearer_token.
        create_with_bearer_token = getattr(
            self._connection_cls, "create_with_bearer_token", None
        )
        if self._auth_mode is AuthMode.ON_BEHALF_OF and callable(create_with_bearer_token):
            connection = create_with_bearer_token(
                self._org_url, token.token, user_agent=user_agent
            )
        else:
            connection = self._connection_cls(
                base_url=self._org_url,
                creds=get_bearer_handler(token.token),
                user_agent=user_agent,
            )

        logger.info(
            "WebApi client initialized",
            org_url=self._org_url,
            auth_mode=self._auth_mode.value,
        )
        return ClientHandle(
            connection=connection,
            org_url=self._org_url,
            product_name=PRODUCT_NAME,
            product_version=__version__,
            user_agent=user_agent,
        )
