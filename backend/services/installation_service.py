"""
Installation service: checks and installs the UAP receiver delegate.

Assistant configuration only takes effect once the profile's
LSP1UniversalReceiverDelegate key points at the UAP protocol contract.
"""
import logging

from domain.constants import LSP1_UNIVERSAL_RECEIVER_DELEGATE_KEY
from services.async_executor import run_blocking
from services.reconcile_service import submit_data_batch
from utils.codecs import canonical_address

logger = logging.getLogger(__name__)


def delegate_matches(stored_value: bytes, expected_delegate_address: str) -> bool:
    """True if a stored LSP1 delegate value is exactly the expected address."""
    if len(stored_value) != 20:
        if stored_value:
            logger.warning(f"Unexpected {len(stored_value)}-byte receiver delegate value")
        return False
    return stored_value == canonical_address(expected_delegate_address)


async def is_installed(store, profile_address: str, expected_delegate_address: str) -> bool:
    """
    Check whether the profile's receiver delegate is the expected protocol address.

    Read errors propagate so callers can tell "not installed" from "could not check".
    """
    stored = await run_blocking(store.get_data, profile_address, LSP1_UNIVERSAL_RECEIVER_DELEGATE_KEY)
    return delegate_matches(stored, expected_delegate_address)


async def install_protocol(store, profile_address: str, protocol_address: str) -> dict:
    """
    Point the profile's LSP1UniversalReceiverDelegate at the UAP protocol.

    Returns:
        dict: {tx_hash, block_number, already_installed, ...}
    """
    if await is_installed(store, profile_address, protocol_address):
        logger.info(f"UAP protocol already installed on {profile_address}")
        return {"tx_hash": None, "already_installed": True}

    logger.info(f"Installing UAP protocol {protocol_address} on {profile_address}")
    result = await submit_data_batch(
        store,
        profile_address,
        [LSP1_UNIVERSAL_RECEIVER_DELEGATE_KEY],
        [canonical_address(protocol_address)],
    )
    return {**result, "already_installed": False}
