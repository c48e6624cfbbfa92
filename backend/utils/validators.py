"""
Input validation utilities for the Tip Assistant backend.

Provides reusable validators for EVM addresses and the tip settings the
assistant stores. Range rules live here, not in the codecs.
"""
from fastapi import Path
from eth_utils import is_address, is_checksum_address, to_checksum_address

from domain.errors import ValidationError

MIN_TIP_PERCENTAGE = 1
MAX_TIP_PERCENTAGE = 100


def validate_evm_address(address: str, field: str = "address") -> str:
    """
    Validate an EVM address format and (for mixed case) its checksum.

    Returns:
        The checksummed address

    Raises:
        ValidationError(400) if the address is invalid
    """
    if not address:
        raise ValidationError("Address is required", field=field)

    if len(address) != 42 or not address.startswith("0x"):
        raise ValidationError(
            f"expected 0x-prefixed 40 hex characters, got {len(address)} characters",
            field=field,
        )

    if not is_address(address):
        raise ValidationError(f"invalid address or checksum: {address[:12]}...", field=field)

    hex_part = address[2:]
    if hex_part not in (hex_part.lower(), hex_part.upper()) and not is_checksum_address(address):
        raise ValidationError(f"invalid EIP-55 checksum: {address[:12]}...", field=field)

    return to_checksum_address(address)


def validate_tip_percentage(value: str | int) -> int:
    """
    Validate the tip percentage: whole number between 1 and 100.

    Raises:
        ValidationError(400) for decimals, non-numbers or out-of-range values
    """
    text = str(value).strip()
    digits = text[1:] if text.startswith("-") else text
    if not digits.isascii() or not digits.isdecimal():
        raise ValidationError(
            "Tip amount must be between 1 and 100 without decimals", field="tipAmount"
        )
    number = int(text)
    if number < MIN_TIP_PERCENTAGE or number > MAX_TIP_PERCENTAGE:
        raise ValidationError(
            "Tip amount must be between 1 and 100 without decimals", field="tipAmount"
        )
    return number


def validate_tip_destination(tip_address: str, up_address: str) -> str:
    """Destination must be a valid address and must not be the profile itself."""
    destination = validate_evm_address(tip_address, field="tipAddress")
    if destination.lower() == up_address.lower():
        raise ValidationError("Destination cannot be the profile itself", field="tipAddress")
    return destination


def validated_up_address(up_address: str = Path(..., description="Universal Profile address")) -> str:
    """FastAPI dependency for validating profile path parameters."""
    return validate_evm_address(up_address, field="up_address")
