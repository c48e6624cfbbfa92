"""
LUKSO client singleton for ERC725Y storage reads and writes on Universal Profiles.

Implements the remote store interface the assistant services consume:
get_data, get_data_batch, set_data_batch, wait_for_confirmation.
"""
import logging

from web3 import Web3

from config import settings
from exceptions import RemoteReadError, RemoteWriteError

logger = logging.getLogger(__name__)

ERC725Y_ABI = [
    {
        "type": "function",
        "name": "getData",
        "stateMutability": "view",
        "inputs": [{"name": "dataKey", "type": "bytes32"}],
        "outputs": [{"name": "dataValue", "type": "bytes"}],
    },
    {
        "type": "function",
        "name": "getDataBatch",
        "stateMutability": "view",
        "inputs": [{"name": "dataKeys", "type": "bytes32[]"}],
        "outputs": [{"name": "dataValues", "type": "bytes[]"}],
    },
    {
        "type": "function",
        "name": "setDataBatch",
        "stateMutability": "payable",
        "inputs": [
            {"name": "dataKeys", "type": "bytes32[]"},
            {"name": "dataValues", "type": "bytes[]"},
        ],
        "outputs": [],
    },
]


class LuksoClient:
    """Singleton web3 client; connects lazily on first use."""

    _instance = None
    _web3 = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LuksoClient, cls).__new__(cls)
        return cls._instance

    def _initialize_web3(self):
        """Initialize the HTTP provider for the configured RPC endpoint."""
        self._web3 = Web3(
            Web3.HTTPProvider(
                settings.lukso_rpc_url,
                request_kwargs={"timeout": settings.rpc_timeout_seconds},
            )
        )
        logger.info(f"LUKSO client initialized for {settings.lukso_rpc_url} (chain {settings.chain_id})")

    @property
    def web3(self) -> Web3:
        """Get the Web3 instance."""
        if self._web3 is None:
            self._initialize_web3()
        return self._web3

    def _profile(self, up_address: str):
        return self.web3.eth.contract(
            address=Web3.to_checksum_address(up_address),
            abi=ERC725Y_ABI,
        )

    def block_number(self) -> int:
        """Latest block number (used as a connectivity probe)."""
        try:
            return self.web3.eth.block_number
        except Exception as e:
            logger.error(f"Error fetching block number: {e}")
            raise RemoteReadError(f"RPC unavailable: {e}") from e

    def get_data(self, up_address: str, key: str) -> bytes:
        """Read a single ERC725Y value."""
        try:
            return bytes(self._profile(up_address).functions.getData(key).call())
        except Exception as e:
            logger.error(f"getData failed on {up_address}: {e}")
            raise RemoteReadError(f"getData failed on {up_address}: {e}") from e

    def get_data_batch(self, up_address: str, keys: list[str]) -> list[bytes]:
        """
        Read several ERC725Y values in one call.

        Returns:
            Values in the same order as keys
        """
        try:
            values = self._profile(up_address).functions.getDataBatch(keys).call()
        except Exception as e:
            logger.error(f"getDataBatch failed on {up_address}: {e}")
            raise RemoteReadError(f"getDataBatch failed on {up_address}: {e}") from e
        return [bytes(value) for value in values]

    def set_data_batch(self, up_address: str, keys: list[str], values: list[bytes]) -> str:
        """
        Sign and submit setDataBatch from the controller account.

        Returns:
            0x-prefixed transaction hash
        """
        try:
            account = settings.controller_account
        except ValueError as e:
            raise RemoteWriteError(str(e)) from e

        try:
            tx = self._profile(up_address).functions.setDataBatch(keys, values).build_transaction({
                "from": account.address,
                "nonce": self.web3.eth.get_transaction_count(account.address, "pending"),
                "chainId": settings.chain_id,
            })
            signed = account.sign_transaction(tx)
            tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            logger.error(f"setDataBatch submission failed on {up_address}: {e}")
            raise RemoteWriteError(f"setDataBatch failed on {up_address}: {e}") from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info(f"setDataBatch submitted on {up_address}: {tx_hash_hex} ({len(keys)} keys)")
        return tx_hash_hex

    def wait_for_confirmation(self, tx_hash: str) -> dict:
        """
        Block until the transaction is mined.

        Raises:
            RemoteWriteError if the receipt never arrives or the transaction reverted
        """
        try:
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=settings.receipt_timeout_seconds
            )
        except Exception as e:
            logger.error(f"Waiting for {tx_hash} failed: {e}")
            raise RemoteWriteError(f"No receipt for {tx_hash}: {e}") from e

        if receipt["status"] != 1:
            raise RemoteWriteError(f"Transaction {tx_hash} reverted in block {receipt['blockNumber']}")
        logger.info(f"Transaction {tx_hash} confirmed in block {receipt['blockNumber']}")
        return dict(receipt)


# Global client instance
lukso_client = LuksoClient()
