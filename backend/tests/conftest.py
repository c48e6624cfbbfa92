"""
Pytest configuration and shared fixtures for Tip Assistant tests.

Provides an in-memory ERC725Y store, an HTTP client wired to it through
dependency overrides, and a mocked web3 instance for LuksoClient tests.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
import pytest_asyncio
from unittest.mock import MagicMock

from httpx import AsyncClient, ASGITransport

from config import settings
from domain.constants import TESTNET_TIP_ASSISTANT_ADDRESS
from exceptions import RemoteReadError, RemoteWriteError

# ── Test Configuration ───────────────────────────────────────────────
# Well-known development key (first Hardhat/Anvil account); never funded on LUKSO.
TEST_CONTROLLER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_CONTROLLER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

settings.chain_id = 4201
if not settings.controller_private_key:
    settings.controller_private_key = TEST_CONTROLLER_KEY
if not settings.uap_protocol_address_testnet:
    settings.uap_protocol_address_testnet = "0x" + "44" * 20

# Digit-only addresses are identical in lowercase and checksummed form.
UP_ADDRESS = "0x" + "11" * 20
TIP_ADDRESS = "0x" + "22" * 20
OTHER_ASSISTANT = "0x" + "33" * 20
PROTOCOL_ADDRESS = settings.uap_protocol_address_testnet
ASSISTANT_ADDRESS = TESTNET_TIP_ASSISTANT_ADDRESS


class FakeERC725YStore:
    """
    In-memory stand-in for LuksoClient.

    set_data_batch stages a write; wait_for_confirmation applies every key of
    that write at once, or none of them if the store is set to revert.
    """

    def __init__(self):
        self.data: dict[str, dict[str, bytes]] = {}
        self.writes: list[tuple[str, list[str], list[bytes]]] = []
        self.read_calls: list[tuple[str, list[str]]] = []
        self.fail_reads = False
        self.fail_writes = False
        self.revert_writes = False
        self.drop_last_value = False
        self._pending: dict[str, tuple[str, list[str], list[bytes]]] = {}
        self._block = 1000

    def put(self, up_address: str, key: str, value: bytes):
        self.data.setdefault(up_address.lower(), {})[key.lower()] = value

    def value(self, up_address: str, key: str) -> bytes:
        return self.data.get(up_address.lower(), {}).get(key.lower(), b"")

    def block_number(self) -> int:
        if self.fail_reads:
            raise RemoteReadError("connection refused")
        return self._block

    def get_data(self, up_address: str, key: str) -> bytes:
        if self.fail_reads:
            raise RemoteReadError("getData failed: connection refused")
        return self.value(up_address, key)

    def get_data_batch(self, up_address: str, keys: list[str]) -> list[bytes]:
        if self.fail_reads:
            raise RemoteReadError("getDataBatch failed: connection refused")
        self.read_calls.append((up_address, list(keys)))
        values = [self.value(up_address, key) for key in keys]
        if self.drop_last_value:
            values = values[:-1]
        return values

    def set_data_batch(self, up_address: str, keys: list[str], values: list[bytes]) -> str:
        if self.fail_writes:
            raise RemoteWriteError("user rejected signing")
        tx_hash = "0x" + f"{len(self.writes) + len(self._pending) + 1:064x}"
        self._pending[tx_hash] = (up_address, list(keys), list(values))
        return tx_hash

    def wait_for_confirmation(self, tx_hash: str) -> dict:
        up_address, keys, values = self._pending.pop(tx_hash)
        self._block += 1
        if self.revert_writes:
            raise RemoteWriteError(f"Transaction {tx_hash} reverted in block {self._block}")
        for key, value in zip(keys, values):
            self.put(up_address, key, value)
        self.writes.append((up_address, keys, values))
        return {"status": 1, "blockNumber": self._block, "transactionHash": tx_hash}


# ── Store Fixtures ───────────────────────────────────────────────────


@pytest.fixture
def fake_store() -> FakeERC725YStore:
    """Empty in-memory profile storage."""
    return FakeERC725YStore()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Write endpoints share one limiter; start every test with a clean window."""
    from middleware.rate_limit import _limiter
    _limiter.reset()
    yield
    _limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def client(fake_store):
    """HTTP client whose routes talk to the in-memory store."""
    from main import app
    from deps import get_store

    app.dependency_overrides[get_store] = lambda: fake_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def mock_web3():
    """Mock Web3 instance injected into the LuksoClient singleton."""
    mock = MagicMock()
    mock.eth.block_number = 4242
    mock.eth.get_transaction_count.return_value = 7
    mock.eth.send_raw_transaction.return_value = bytes.fromhex("ab" * 32)
    mock.eth.wait_for_transaction_receipt.return_value = {"status": 1, "blockNumber": 4243}

    from lukso_client import lukso_client as lc
    original = lc._web3
    lc._web3 = mock
    yield mock
    lc._web3 = original
