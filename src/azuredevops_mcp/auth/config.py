from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from azuredevops_mcp.errors import ConfigurationError

from .scopes import org_url_from_name


class AuthMode(str, Enum):
    """Supported token acquisition modes."""

    DEFAULT = "default"
    ON_BEHALF_OF = "obo"


@dataclass(frozen=True)
class OboConfig:
    """Validated inputs for the on-behalf-of exchange."""

    tenant_id: str
    client_id: str
    client_secret: SecretStr
    user_assertion: SecretStr


class AuthSettings(BaseSettings):
    """Process configuration for Azure DevOps authentication.

    Read once at startup. Fields are read only from the environment
    variable names listed below, primary name first; the first non-empty
    one wins. Keyword construction uses the same names, e.g.
    ``AuthSettings(ADO_AUTH="obo")``; bare field names are ignored so a
    generic ``CLIENT_SECRET`` or ``AUTH_MODE`` in the environment has no
    effect.

    Environment variables (fallback names in parentheses):
        - ADO_ORG
        - ADO_AUTH (``obo`` selects on-behalf-of, anything else is default)
        - AZURE_AD_TENANT_ID (AZURE_TENANT_ID)
        - AZURE_AD_CLIENT_ID (AZURE_CLIENT_ID)
        - AZURE_AD_CLIENT_SECRET (AZURE_CLIENT_SECRET)
        - MCP_USER_ASSERTION (ADO_USER_ASSERTION)
        - ADO_MCP_AZURE_TOKEN_CREDENTIALS
        - ADO_MCP_LOG_LEVEL
        - ADO_MCP_LOG_FORMAT (``json`` or ``console``)
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    organization: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ADO_ORG"),
    )
    auth_mode: AuthMode = Field(
        default=AuthMode.DEFAULT,
        validation_alias=AliasChoices("ADO_AUTH"),
    )
    tenant_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AZURE_AD_TENANT_ID", "AZURE_TENANT_ID"),
    )
    client_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AZURE_AD_CLIENT_ID", "AZURE_CLIENT_ID"),
    )
    client_secret: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("AZURE_AD_CLIENT_SECRET", "AZURE_CLIENT_SECRET"),
    )
    user_assertion: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("MCP_USER_ASSERTION", "ADO_USER_ASSERTION"),
    )
    token_credentials: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ADO_MCP_AZURE_TOKEN_CREDENTIALS"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("ADO_MCP_LOG_LEVEL"),
    )
    log_format: str = Field(
        default="console",
        validation_alias=AliasChoices("ADO_MCP_LOG_FORMAT"),
    )

    @field_validator("auth_mode", mode="before")
    @classmethod
    def _parse_auth_mode(cls, v: Any) -> AuthMode:
        """Map ``obo`` (any case) to ON_BEHALF_OF and everything else to DEFAULT."""
        if isinstance(v, AuthMode):
            return v
        if str(v or "").strip().lower() == AuthMode.ON_BEHALF_OF.value:
            return AuthMode.ON_BEHALF_OF
        return AuthMode.DEFAULT

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, v: str) -> str:
        return v.strip().upper()

    def obo_config(self, tenant_fallback: str | None = None) -> OboConfig:
        """Validate and return the on-behalf-of inputs.

        Args:
            tenant_fallback: Tenant to use when no tenant env var is set
                (normally the ``--tenant`` flag).

        Raises:
            ConfigurationError: If the user assertion is missing, or if any
                of tenant, client id and client secret is missing.
        """
        if not self.user_assertion or not self.user_assertion.get_secret_value():
            raise ConfigurationError(
                "ADO_AUTH=obo is set but MCP_USER_ASSERTION was not provided."
            )

        tenant_id = self.tenant_id or tenant_fallback
        missing = [
            name
            for name, present in (
                ("tenant_id", bool(tenant_id)),
                ("client_id", bool(self.client_id)),
                (
                    "client_secret",
                    bool(self.client_secret and self.client_secret.get_secret_value()),
                ),
            )
            if not present
        ]
        if missing:
            raise ConfigurationError(
                "ADO_AUTH=obo requires AZURE_(AD_)TENANT_ID, AZURE_(AD_)CLIENT_ID "
                "and AZURE_(AD_)CLIENT_SECRET to be set.",
                details={"missing": missing},
            )

        return OboConfig(
            tenant_id=tenant_id,
            client_id=self.client_id,
            client_secret=self.client_secret,
            user_assertion=self.user_assertion,
        )

    def default_tenant(self, tenant_override: str | None = None) -> str | None:
        """Tenant for the credential chain: the explicit flag wins over env."""
        return tenant_override or self.tenant_id


@dataclass(frozen=True)
class ServerConfig:
    """Startup values that stay fixed for the life of the process."""

    organization: str
    org_url: str
    tenant_id: str | None = None

    @classmethod
    def resolve(
        cls,
        organization: str | None,
        settings: AuthSettings,
        tenant_id: str | None = None,
    ) -> "ServerConfig":
        """Combine CLI arguments with settings, the CLI taking precedence.

        Raises:
            ConfigurationError: If no organization is available or it is malformed.
        """
        name = (organization or settings.organization or "").strip()
        if not name:
            raise ConfigurationError(
                "Azure DevOps organization is required. "
                "Provide as positional arg or set ADO_ORG env var."
            )
        try:
            org_url = org_url_from_name(name)
        except ValueError as exc:
            raise ConfigurationError(str(exc), details={"organization": name}) from exc
        return cls(organization=name, org_url=org_url, tenant_id=tenant_id or None)
