"""
Shared FastAPI dependencies.

Routers receive the remote ERC725Y store through get_store so tests can swap
in an in-memory fake via app.dependency_overrides.
"""

from __future__ import annotations

from config import settings
from domain.errors import ConfigurationError
from lukso_client import lukso_client


def get_store():
    """Remote store used by the assistant services."""
    return lukso_client


def get_assistant_address() -> str:
    """Tip Assistant deployment for the configured chain."""
    return settings.assistant_address


def require_controller() -> str:
    """
    Require a configured controller key before accepting a write.

    Returns the controller address that will sign the transaction.
    """
    try:
        return settings.controller_account.address
    except ValueError as e:
        raise ConfigurationError(str(e))


def get_protocol_address() -> str:
    """UAP receiver-delegate address for the configured chain."""
    try:
        return settings.uap_protocol_address
    except ValueError as e:
        raise ConfigurationError(str(e))
