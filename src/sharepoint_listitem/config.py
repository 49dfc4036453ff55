"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Tuning knobs
    have sensible defaults but can be overridden via environment variables.
    """

    # Required — no defaults, fail at startup if missing
    client_id: str
    client_secret: str
    tenant_id: str

    # Tuning — defaults provided, overridable via env
    probe_workers: int = 8
    strict_content_type: bool = False


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        SLI_CLIENT_ID: Azure AD application (client) ID.
        SLI_CLIENT_SECRET: Azure AD application client secret.
        SLI_TENANT_ID: Azure AD tenant ID.

    Optional environment variables (with defaults):
        SLI_PROBE_WORKERS: Max concurrent folder existence checks (default: 8).
        SLI_STRICT_CONTENT_TYPE: Fail when a content type hint matches nothing
            instead of creating the item without one (default: false).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        client_id=os.environ["SLI_CLIENT_ID"],
        client_secret=os.environ["SLI_CLIENT_SECRET"],
        tenant_id=os.environ["SLI_TENANT_ID"],
        probe_workers=int(os.environ.get("SLI_PROBE_WORKERS", "8")),
        strict_content_type=(
            os.environ.get("SLI_STRICT_CONTENT_TYPE", "false").strip().lower() in _TRUE_VALUES
        ),
    )
