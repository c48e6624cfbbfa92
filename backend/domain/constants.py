"""
Domain constants used across services/routers.
"""
from eth_utils import keccak

# ── Networks ────────────────────────────────────────────────────────
LUKSO_MAINNET_CHAIN_ID = 42
LUKSO_TESTNET_CHAIN_ID = 4201

# ── Tip Assistant contracts ─────────────────────────────────────────
MAINNET_TIP_ASSISTANT_ADDRESS = "0x0c3dc7ea7521c79b99a667f2024d76714d33def2"
TESTNET_TIP_ASSISTANT_ADDRESS = "0xf24c39a4d55994e70059443622fc166f05b5ff14"

# Ordered field schema stored under the assistant's UAPExecutiveConfig key
TIP_ASSISTANT_CONFIG = [
    {"name": "tipAddress", "type": "address"},
    {"name": "tipAmount", "type": "uint256"},
]

# ── LSP1 / ERC725Y keys ─────────────────────────────────────────────
LSP0_VALUE_RECEIVED_TYPE_ID = "0x" + keccak(text="LSP0ValueReceived").hex()
LSP1_UNIVERSAL_RECEIVER_DELEGATE_KEY = "0x" + keccak(text="LSP1UniversalReceiverDelegate").hex()

# The tip assistant only reacts to native LYX transfers
SUPPORTED_TRANSACTION_TYPES = [LSP0_VALUE_RECEIVED_TYPE_ID]

EMPTY_VALUE = b""

# ── LSP6 permissions ────────────────────────────────────────────────
LSP6_PERMISSIONS = {
    "CHANGEOWNER": 1 << 0,
    "ADDCONTROLLER": 1 << 1,
    "EDITPERMISSIONS": 1 << 2,
    "ADDEXTENSIONS": 1 << 3,
    "CHANGEEXTENSIONS": 1 << 4,
    "ADDUNIVERSALRECEIVERDELEGATE": 1 << 5,
    "CHANGEUNIVERSALRECEIVERDELEGATE": 1 << 6,
    "REENTRANCY": 1 << 7,
    "SUPER_TRANSFERVALUE": 1 << 8,
    "TRANSFERVALUE": 1 << 9,
    "SUPER_CALL": 1 << 10,
    "CALL": 1 << 11,
    "SUPER_STATICCALL": 1 << 12,
    "STATICCALL": 1 << 13,
    "SUPER_DELEGATECALL": 1 << 14,
    "DELEGATECALL": 1 << 15,
    "DEPLOY": 1 << 16,
    "SUPER_SETDATA": 1 << 17,
    "SETDATA": 1 << 18,
    "ENCRYPT": 1 << 19,
    "DECRYPT": 1 << 20,
    "SIGN": 1 << 21,
    "EXECUTE_RELAY_CALL": 1 << 22,
}

DEFAULT_UP_CONTROLLER_PERMISSIONS = {
    "SUPER_SETDATA": True,
    "SETDATA": True,
    "SIGN": True,
    "ENCRYPT": True,
    "DECRYPT": True,
    "SUPER_CALL": True,
    "CALL": True,
    "SUPER_STATICCALL": True,
    "STATICCALL": True,
    "SUPER_TRANSFERVALUE": True,
    "TRANSFERVALUE": True,
    "DEPLOY": True,
    "EXECUTE_RELAY_CALL": True,
    "EDITPERMISSIONS": True,
    "ADDCONTROLLER": True,
}

# Needed to install or swap the UAP receiver delegate
UAP_CONTROLLER_PERMISSIONS = {
    "ADDUNIVERSALRECEIVERDELEGATE": True,
    "CHANGEUNIVERSALRECEIVERDELEGATE": True,
}


def get_assistant_address(chain_id: int) -> str:
    """Tip Assistant address for a chain; anything but mainnet uses the testnet deployment."""
    if chain_id == LUKSO_MAINNET_CHAIN_ID:
        return MAINNET_TIP_ASSISTANT_ADDRESS
    return TESTNET_TIP_ASSISTANT_ADDRESS
