"""
Tests for ERC725Y data key derivation.

Tests: generate_mapping_key, generate_mapping_with_grouping_key, to_raw_bytes
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
from eth_utils import keccak

from domain.constants import LSP0_VALUE_RECEIVED_TYPE_ID, TESTNET_TIP_ASSISTANT_ADDRESS
from exceptions import InvalidInputError
from utils.data_keys import (
    executive_config_key,
    generate_mapping_key,
    generate_mapping_with_grouping_key,
    to_raw_bytes,
    type_config_key,
)


class TestGenerateMappingKey:
    """Tests for generate_mapping_key()."""

    @pytest.mark.unit
    def test_layout(self):
        """Key is keccak(name)[:10] + 0000 + first 20 bytes of the value."""
        key = generate_mapping_key("UAPTypeConfig", LSP0_VALUE_RECEIVED_TYPE_ID)
        expected = (
            "0x"
            + keccak(text="UAPTypeConfig")[:10].hex()
            + "0000"
            + LSP0_VALUE_RECEIVED_TYPE_ID[2:42]
        )
        assert key == expected

    @pytest.mark.unit
    def test_key_is_32_bytes(self):
        key = generate_mapping_key("UAPExecutiveConfig", TESTNET_TIP_ASSISTANT_ADDRESS)
        assert key.startswith("0x")
        assert len(key) == 66

    @pytest.mark.unit
    def test_address_embedded_verbatim(self):
        """A 20-byte address fills the last 20 bytes of the key."""
        key = generate_mapping_key("UAPExecutiveConfig", TESTNET_TIP_ASSISTANT_ADDRESS)
        assert key.endswith(TESTNET_TIP_ASSISTANT_ADDRESS[2:])

    @pytest.mark.unit
    def test_deterministic(self):
        first = generate_mapping_key("UAPTypeConfig", LSP0_VALUE_RECEIVED_TYPE_ID)
        second = generate_mapping_key("UAPTypeConfig", LSP0_VALUE_RECEIVED_TYPE_ID)
        assert first == second

    @pytest.mark.unit
    def test_namespaces_differ_for_same_value(self):
        """TypeConfig and ExecutiveConfig never collide on the same value."""
        for value in (LSP0_VALUE_RECEIVED_TYPE_ID, TESTNET_TIP_ASSISTANT_ADDRESS):
            assert type_config_key(value) != executive_config_key(value)

    @pytest.mark.unit
    def test_case_insensitive_value(self):
        """Upper- and lowercase hex produce the same key."""
        upper = "0x" + TESTNET_TIP_ASSISTANT_ADDRESS[2:].upper()
        assert executive_config_key(upper) == executive_config_key(TESTNET_TIP_ASSISTANT_ADDRESS)

    @pytest.mark.unit
    def test_accepts_bytes(self):
        raw = bytes.fromhex(LSP0_VALUE_RECEIVED_TYPE_ID[2:])
        assert type_config_key(raw) == type_config_key(LSP0_VALUE_RECEIVED_TYPE_ID)

    @pytest.mark.unit
    def test_short_value_rejected(self):
        with pytest.raises(InvalidInputError):
            generate_mapping_key("UAPTypeConfig", "0x1234")

    @pytest.mark.unit
    def test_non_hex_rejected(self):
        with pytest.raises(InvalidInputError):
            generate_mapping_key("UAPTypeConfig", "0x" + "zz" * 32)

    @pytest.mark.unit
    def test_odd_length_rejected(self):
        with pytest.raises(InvalidInputError):
            generate_mapping_key("UAPTypeConfig", "0x" + "a" * 41)


class TestMappingWithGroupingKey:
    """Tests for generate_mapping_with_grouping_key()."""

    @pytest.mark.unit
    def test_address_permissions_prefix(self):
        """Matches the LSP6 AddressPermissions:Permissions:<address> prefix."""
        key = generate_mapping_with_grouping_key("AddressPermissions", "Permissions", "0x" + "ab" * 20)
        assert key == "0x4b80742de2bf82acb3630000" + "ab" * 20

    @pytest.mark.unit
    def test_layout(self):
        key = generate_mapping_with_grouping_key("First", "Second", "0x" + "01" * 20)
        expected = (
            "0x"
            + keccak(text="First")[:6].hex()
            + keccak(text="Second")[:4].hex()
            + "0000"
            + "01" * 20
        )
        assert key == expected


class TestToRawBytes:
    """Tests for to_raw_bytes()."""

    @pytest.mark.unit
    def test_prefixed_and_bare_hex_match(self):
        assert to_raw_bytes("0xdeadbeef") == to_raw_bytes("deadbeef") == b"\xde\xad\xbe\xef"

    @pytest.mark.unit
    def test_empty_hex(self):
        assert to_raw_bytes("0x") == b""

    @pytest.mark.unit
    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidInputError):
            to_raw_bytes(12345)
