"""
Tests for LSP6 controller permission bitmaps.

Tests: permissions_key, encode_permissions, decode_permissions,
grant_controller_permissions
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest

from domain.constants import (
    DEFAULT_UP_CONTROLLER_PERMISSIONS,
    LSP6_PERMISSIONS,
    UAP_CONTROLLER_PERMISSIONS,
)
from exceptions import InvalidInputError, MalformedDataError
from services.permission_service import (
    decode_permissions,
    encode_permissions,
    grant_controller_permissions,
    permissions_key,
)
from tests.conftest import UP_ADDRESS

CONTROLLER = "0x" + "ab" * 20


class TestPermissionsKey:

    @pytest.mark.unit
    def test_key_layout(self):
        assert permissions_key(CONTROLLER) == "0x4b80742de2bf82acb3630000" + "ab" * 20

    @pytest.mark.unit
    def test_case_insensitive(self):
        assert permissions_key("0x" + "AB" * 20) == permissions_key(CONTROLLER)

    @pytest.mark.unit
    def test_invalid_controller(self):
        with pytest.raises(InvalidInputError):
            permissions_key("0x1234")


class TestEncodePermissions:

    @pytest.mark.unit
    def test_single_flag(self):
        encoded = encode_permissions({"CHANGEOWNER": True})
        assert len(encoded) == 32
        assert int.from_bytes(encoded, "big") == 1

    @pytest.mark.unit
    def test_disabled_flags_ignored(self):
        assert encode_permissions({"SETDATA": True, "CALL": False}) == encode_permissions({"SETDATA": True})

    @pytest.mark.unit
    def test_setdata_bit(self):
        encoded = encode_permissions({"SETDATA": True})
        assert encoded.hex() == "00" * 29 + "040000"

    @pytest.mark.unit
    def test_unknown_permission(self):
        with pytest.raises(InvalidInputError, match="FLY"):
            encode_permissions({"FLY": True})

    @pytest.mark.unit
    def test_uap_permissions_bits(self):
        encoded = encode_permissions(UAP_CONTROLLER_PERMISSIONS)
        assert int.from_bytes(encoded, "big") == (1 << 5) | (1 << 6)


class TestDecodePermissions:

    @pytest.mark.unit
    def test_empty_means_no_permissions(self):
        decoded = decode_permissions(b"")
        assert set(decoded) == set(LSP6_PERMISSIONS)
        assert not any(decoded.values())

    @pytest.mark.unit
    def test_round_trip_defaults(self):
        decoded = decode_permissions(encode_permissions(DEFAULT_UP_CONTROLLER_PERMISSIONS))
        enabled = {name for name, on in decoded.items() if on}
        assert enabled == set(DEFAULT_UP_CONTROLLER_PERMISSIONS)

    @pytest.mark.unit
    def test_hex_input(self):
        decoded = decode_permissions("0x" + "00" * 31 + "01")
        assert decoded["CHANGEOWNER"] is True
        assert decoded["ADDCONTROLLER"] is False

    @pytest.mark.unit
    def test_wrong_size_rejected(self):
        with pytest.raises(MalformedDataError):
            decode_permissions(b"\x01")


class TestGrantControllerPermissions:

    @pytest.mark.asyncio
    async def test_writes_merged_bitmap(self, fake_store):
        result = await grant_controller_permissions(fake_store, UP_ADDRESS, CONTROLLER)

        key = permissions_key(CONTROLLER)
        assert result["data_keys"] == [key]
        decoded = decode_permissions(fake_store.value(UP_ADDRESS, key))
        assert decoded["ADDUNIVERSALRECEIVERDELEGATE"] is True
        assert decoded["CHANGEUNIVERSALRECEIVERDELEGATE"] is True
        assert decoded["SETDATA"] is True
        assert decoded["CHANGEOWNER"] is False
