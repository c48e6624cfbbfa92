"""
ERC725Y data key derivation (LSP2 key types used by the assistant protocol).

Mapping keys:            keccak256(name)[:10] + 0000 + value[:20]
Mapping-with-grouping:   keccak256(first)[:6] + keccak256(second)[:4] + 0000 + address
"""
from eth_utils import keccak

from exceptions import InvalidInputError

TYPE_CONFIG_KEY_NAME = "UAPTypeConfig"
EXECUTIVE_CONFIG_KEY_NAME = "UAPExecutiveConfig"

_KEY_PADDING = b"\x00\x00"


def to_raw_bytes(value: str | bytes, min_length: int = 0) -> bytes:
    """
    Convert a 0x-prefixed (or bare) hex string or bytes into raw bytes.

    Raises:
        InvalidInputError if the hex is malformed or shorter than min_length bytes
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        hex_str = value[2:] if value[:2].lower() == "0x" else value
        if len(hex_str) % 2:
            raise InvalidInputError(f"Hex value has an odd number of digits: {value[:12]}...")
        try:
            raw = bytes.fromhex(hex_str)
        except ValueError as e:
            raise InvalidInputError(f"Invalid hex value: {value[:12]}...") from e
    else:
        raise InvalidInputError(f"Expected hex string or bytes, got {type(value).__name__}")

    if len(raw) < min_length:
        raise InvalidInputError(
            f"Expected at least {min_length} bytes, got {len(raw)}"
        )
    return raw


def generate_mapping_key(key_name: str, type_value: str | bytes) -> str:
    """
    Derive an LSP2 Mapping data key.

    Args:
        key_name: Namespace name, e.g. "UAPTypeConfig"
        type_value: 32-byte type id or 20-byte address (hex or bytes);
            only its first 20 bytes are embedded

    Returns:
        0x-prefixed 32-byte key
    """
    value = to_raw_bytes(type_value, min_length=20)
    key = keccak(text=key_name)[:10] + _KEY_PADDING + value[:20]
    return "0x" + key.hex()


def generate_mapping_with_grouping_key(first_word: str, second_word: str, address: str | bytes) -> str:
    """Derive an LSP2 MappingWithGrouping key such as AddressPermissions:Permissions:<address>."""
    raw_address = to_raw_bytes(address, min_length=20)
    key = (
        keccak(text=first_word)[:6]
        + keccak(text=second_word)[:4]
        + _KEY_PADDING
        + raw_address[:20]
    )
    return "0x" + key.hex()


def type_config_key(type_id: str | bytes) -> str:
    return generate_mapping_key(TYPE_CONFIG_KEY_NAME, type_id)


def executive_config_key(assistant_address: str | bytes) -> str:
    return generate_mapping_key(EXECUTIVE_CONFIG_KEY_NAME, assistant_address)
