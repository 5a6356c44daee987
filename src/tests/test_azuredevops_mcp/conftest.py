from __future__ import annotations

import asyncio
import os
from typing import Any, Iterator

import pytest
from azure.core.credentials import AccessToken

from azuredevops_mcp.auth import AuthSettings, chain

_ENV_PREFIXES = ("AZURE_", "ADO_", "MCP_")
# Generic names that must never be read as settings.
_GENERIC_NAMES = (
    "ORGANIZATION",
    "AUTH_MODE",
    "TENANT_ID",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "USER_ASSERTION",
    "TOKEN_CREDENTIALS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clear_azure_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove AZURE_/ADO_/MCP_ and generic setting names to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    # Registered first so the value written by the code under test is undone too.
    monkeypatch.setenv(chain.TOKEN_CREDENTIALS_ENV, "")
    to_clear = [
        k
        for k in os.environ.keys()
        if k.upper().startswith(_ENV_PREFIXES) or k.upper() in _GENERIC_NAMES
    ]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


class CallLog:
    """Shared, ordered record of what the fake credentials were asked to do."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def names(self, kind: str) -> list[str]:
        return [name for event, name in self.events if event == kind]


def make_credential(
    name: str,
    log: CallLog,
    *,
    token: str | None = "tok",
    error: Exception | None = None,
    delay: float = 0.0,
):
    """Create a fake async credential class that records its lifecycle.

    Args:
        name: Class name to report in the call log.
        log: Shared call log.
        token: Token string to return; ``None`` returns no token at all.
        error: Exception to raise from ``get_token`` instead of returning.
        delay: Seconds to sleep inside ``get_token``.
    """

    class _C:
        instances: list["_C"] = []

        def __init__(self, *args: Any, **kwargs: Any) -> None:
            self.args = args
            self.kwargs = dict(kwargs)
            self.env_selector = os.environ.get(chain.TOKEN_CREDENTIALS_ENV)
            self.scopes: tuple[str, ...] = ()
            self.closed = False
            type(self).instances.append(self)
            self.index = len(type(self).instances)
            log.events.append(("init", name))

        async def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken | None:
            self.scopes = scopes
            log.events.append(("get_token", name))
            if delay:
                await asyncio.sleep(delay)
            if error is not None:
                raise error
            if token is None:
                return None
            return AccessToken(f"{token}-{self.index}" if token else "", 1_700_000_000)

        async def close(self) -> None:
            self.closed = True

        async def __aenter__(self) -> "_C":
            return self

        async def __aexit__(self, *exc: Any) -> None:
            await self.close()

    _C.__name__ = _C.__qualname__ = name
    return _C


def make_chain(log: CallLog):
    """Fake ChainedTokenCredential: first credential that yields a token wins."""

    class ChainedTokenCredential:
        instances: list["ChainedTokenCredential"] = []

        def __init__(self, *credentials: Any) -> None:
            self.credentials = credentials
            type(self).instances.append(self)
            log.events.append(("init", "ChainedTokenCredential"))

        async def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
            last_error: Exception | None = None
            for credential in self.credentials:
                try:
                    return await credential.get_token(*scopes, **kwargs)
                except Exception as exc:  # noqa: BLE001 - mirrors the real chain
                    last_error = exc
            assert last_error is not None
            raise last_error

        async def __aenter__(self) -> "ChainedTokenCredential":
            return self

        async def __aexit__(self, *exc: Any) -> None:
            for credential in self.credentials:
                await credential.close()

    return ChainedTokenCredential


@pytest.fixture()
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture()
def fake_identity(monkeypatch: pytest.MonkeyPatch, call_log: CallLog) -> dict[str, Any]:
    """Replace azure.identity.aio classes used by the chain module with recorders.

    Returns:
        dict[str, Any]: The fake classes by name, plus the shared call log.
    """
    fakes = {
        "DefaultAzureCredential": make_credential("DefaultAzureCredential", call_log, token="default"),
        "AzureCliCredential": make_credential("AzureCliCredential", call_log, token="cli"),
        "OnBehalfOfCredential": make_credential("OnBehalfOfCredential", call_log, token="obo"),
        "ChainedTokenCredential": make_chain(call_log),
    }
    for name, cls in fakes.items():
        monkeypatch.setattr(chain, name, cls)
    return {**fakes, "log": call_log}


@pytest.fixture()
def obo_settings() -> AuthSettings:
    return AuthSettings(
        ADO_AUTH="obo",
        AZURE_AD_TENANT_ID="tenant-1",
        AZURE_AD_CLIENT_ID="client-1",
        AZURE_AD_CLIENT_SECRET="s3cret",
        MCP_USER_ASSERTION="user-jwt",
    )


@pytest.fixture()
def fake_credential(call_log: CallLog):
    """Build extra fake credential classes sharing the test's call log."""

    def _make(name: str, **kwargs: Any):
        return make_credential(name, call_log, **kwargs)

    return _make
