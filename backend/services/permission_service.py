"""
Permission service: LSP6 permission bitmaps for profile controllers.

The controller that installs the UAP protocol needs the receiver-delegate
permissions on top of the usual extension defaults.
"""
import logging

from domain.constants import (
    DEFAULT_UP_CONTROLLER_PERMISSIONS,
    LSP6_PERMISSIONS,
    UAP_CONTROLLER_PERMISSIONS,
)
from exceptions import InvalidInputError, MalformedDataError
from services.reconcile_service import submit_data_batch
from utils.codecs import canonical_address, is_empty_value
from utils.data_keys import generate_mapping_with_grouping_key, to_raw_bytes

logger = logging.getLogger(__name__)

PERMISSIONS_BITMAP_SIZE = 32


def permissions_key(controller_address: str) -> str:
    """AddressPermissions:Permissions:<address> data key."""
    return generate_mapping_with_grouping_key(
        "AddressPermissions", "Permissions", canonical_address(controller_address)
    )


def encode_permissions(flags: dict[str, bool]) -> bytes:
    """
    Encode named permission flags as a 32-byte bitmap.

    Raises:
        InvalidInputError for an unknown permission name
    """
    bitmap = 0
    for name, enabled in flags.items():
        if name not in LSP6_PERMISSIONS:
            raise InvalidInputError(f"Unknown LSP6 permission: {name}")
        if enabled:
            bitmap |= LSP6_PERMISSIONS[name]
    return bitmap.to_bytes(PERMISSIONS_BITMAP_SIZE, "big")


def decode_permissions(value: str | bytes) -> dict[str, bool]:
    """Decode a permission bitmap into {name: enabled} for every known permission."""
    if is_empty_value(value):
        bitmap = 0
    else:
        raw = to_raw_bytes(value)
        if len(raw) != PERMISSIONS_BITMAP_SIZE:
            raise MalformedDataError(f"Permission bitmap must be 32 bytes, got {len(raw)}")
        bitmap = int.from_bytes(raw, "big")
    return {name: bool(bitmap & bit) for name, bit in LSP6_PERMISSIONS.items()}


async def grant_controller_permissions(store, profile_address: str, controller_address: str) -> dict:
    """
    Grant a controller the default extension permissions plus UAP delegate permissions.

    Overwrites the controller's existing bitmap.
    """
    flags = {**DEFAULT_UP_CONTROLLER_PERMISSIONS, **UAP_CONTROLLER_PERMISSIONS}
    key = permissions_key(controller_address)
    logger.info(f"Granting {len(flags)} permissions to {controller_address} on {profile_address}")
    return await submit_data_batch(store, profile_address, [key], [encode_permissions(flags)])
