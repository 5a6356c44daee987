"""
Exception classes raised while bootstrapping Azure DevOps access.
"""

from __future__ import annotations

from typing import Any


class AzureDevOpsMcpError(Exception):
    """Base exception for all azuredevops_mcp errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(AzureDevOpsMcpError):
    """Raised when a required setting is absent or inconsistent."""


class AuthenticationError(AzureDevOpsMcpError):
    """Raised when the identity provider returns no usable token."""
