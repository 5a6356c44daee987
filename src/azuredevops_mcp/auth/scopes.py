from typing import Final

AZURE_DEVOPS_SCOPE: Final[str] = "499b84ac-1321-427f-aa17-267ca6975798/.default"
AZURE_DEVOPS_HOST: Final[str] = "https://dev.azure.com"


def org_url_from_name(organization: str) -> str:
    """Return the Azure DevOps organization URL.

    Args:
        organization: Organization name (e.g., "contoso").

    Returns:
        The "https://dev.azure.com/<organization>" URL.

    Raises:
        ValueError: If ``organization`` is empty or contains "/" or whitespace.
    """
    name = organization.strip()
    if not name or "/" in name or any(ch.isspace() for ch in name):
        raise ValueError(f"Invalid Azure DevOps organization name: {organization!r}")
    return f"{AZURE_DEVOPS_HOST}/{name}"
