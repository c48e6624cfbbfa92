"""
Binary codecs for assistant configuration values stored on a Universal Profile.

Address list layout (UAPTypeConfig values):
    uint16 big-endian count || count x 20-byte address, no padding

Field layout (UAPExecutiveConfig values):
    standard ABI encoding of the schema types in schema order

An empty byte string is the "unset" sentinel for both.
"""
import logging

from eth_abi import decode, encode
from eth_abi.packed import encode_packed
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import is_address, to_canonical_address, to_checksum_address

from exceptions import CapacityExceededError, InvalidInputError, MalformedDataError
from utils.data_keys import to_raw_bytes

logger = logging.getLogger(__name__)

MAX_ADDRESSES = 0xFFFF
_COUNT_SIZE = 2
_ADDRESS_SIZE = 20


def canonical_address(address: str | bytes) -> bytes:
    """Normalize an address to its raw 20-byte form for comparisons."""
    if isinstance(address, (bytes, bytearray)) and len(address) == _ADDRESS_SIZE:
        return bytes(address)
    if not is_address(address):
        raise InvalidInputError(f"Invalid EVM address: {str(address)[:12]}...")
    return to_canonical_address(address)


def is_empty_value(data: str | bytes | None) -> bool:
    """True for None, b"", "" and "0x"."""
    if data is None:
        return True
    if isinstance(data, str):
        return data in ("", "0x", "0X")
    return len(data) == 0


# ── Address lists ───────────────────────────────────────────────────


def encode_addresses(addresses: list[str]) -> bytes:
    """
    Pack addresses as uint16 count followed by raw 20-byte entries.

    Raises:
        CapacityExceededError if there are more than 65535 addresses
        InvalidInputError if an entry is not a valid address
    """
    if len(addresses) > MAX_ADDRESSES:
        raise CapacityExceededError(
            f"Number of addresses exceeds uint16 capacity: {len(addresses)}"
        )
    entries = [to_checksum_address(canonical_address(address)) for address in addresses]
    return encode_packed(["uint16"] + ["address"] * len(entries), [len(entries)] + entries)


def decode_addresses(data: str | bytes | None) -> list[str]:
    """
    Unpack an encoded address list into checksummed addresses.

    Empty input means "no list stored" and returns [].

    Raises:
        MalformedDataError if the buffer is shorter than its declared count requires
    """
    if is_empty_value(data):
        return []
    try:
        raw = to_raw_bytes(data)
    except InvalidInputError as e:
        raise MalformedDataError(f"Address list is not valid hex: {e}") from e

    if len(raw) < _COUNT_SIZE:
        raise MalformedDataError(f"Address list too short for a count prefix: {len(raw)} byte(s)")

    count = int.from_bytes(raw[:_COUNT_SIZE], "big")
    expected = _COUNT_SIZE + count * _ADDRESS_SIZE
    if len(raw) < expected:
        raise MalformedDataError(
            f"Address list declares {count} entries ({expected} bytes) "
            f"but only {len(raw)} bytes are present"
        )
    if len(raw) > expected:
        logger.warning(f"Ignoring {len(raw) - expected} trailing byte(s) after {count} addresses")

    return [
        to_checksum_address(raw[offset:offset + _ADDRESS_SIZE])
        for offset in range(_COUNT_SIZE, expected, _ADDRESS_SIZE)
    ]


# ── Typed fields ────────────────────────────────────────────────────


def _coerce(value, abi_type: str):
    if abi_type == "address":
        if not is_address(value):
            raise InvalidInputError(f"Invalid address value: {str(value)[:12]}...")
        return to_checksum_address(value)
    if abi_type.startswith(("uint", "int")):
        if isinstance(value, bool):
            raise InvalidInputError(f"Expected integer for {abi_type}, got bool")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Expected integer for {abi_type}, got {value!r}") from e
    return value


def encode_fields(values: dict, schema: list[dict]) -> bytes:
    """
    ABI-encode field values in schema order.

    Only type shape is checked here; range rules live in utils.validators.
    """
    types = [param["type"] for param in schema]
    ordered = []
    for param in schema:
        if param["name"] not in values:
            raise InvalidInputError(f"Missing value for field '{param['name']}'")
        ordered.append(_coerce(values[param["name"]], param["type"]))
    try:
        return encode(types, ordered)
    except EncodingError as e:
        raise InvalidInputError(f"Field values do not match schema {types}: {e}") from e


def decode_fields(data: str | bytes, schema: list[dict]) -> dict[str, str]:
    """
    ABI-decode a non-empty field value into {name: str(value)}.

    Callers handle the empty sentinel before calling this.
    """
    types = [param["type"] for param in schema]
    try:
        decoded = decode(types, to_raw_bytes(data))
    except (DecodingError, InvalidInputError) as e:
        raise MalformedDataError(f"Stored config does not decode as {types}: {e}") from e

    result = {}
    for param, value in zip(schema, decoded):
        if param["type"] == "address":
            value = to_checksum_address(value)
        result[param["name"]] = str(value)
    return result
