"""
Reconcile service: subscribes, reconfigures and deactivates the assistant.

Both operations re-read the profile, compute the full replacement values for
every UAPTypeConfig key plus the assistant's UAPExecutiveConfig key, and
submit them as one setDataBatch transaction. Either every key changes or none.
"""
import logging

from domain.constants import EMPTY_VALUE, SUPPORTED_TRANSACTION_TYPES, TIP_ASSISTANT_CONFIG
from domain.enums import AssistantState
from services.async_executor import run_blocking
from services.config_service import ConfigurationSnapshot, fetch_assistant_config
from utils.codecs import canonical_address, encode_addresses, encode_fields
from utils.data_keys import executive_config_key, type_config_key

logger = logging.getLogger(__name__)


def _with_assistant(addresses: list[str], assistant_address: str) -> list[str]:
    """Return addresses with the assistant present exactly once, order preserved."""
    assistant = canonical_address(assistant_address)
    result = []
    seen = False
    for address in addresses:
        if canonical_address(address) == assistant:
            if seen:
                continue
            seen = True
        result.append(address)
    if not seen:
        result.append(assistant_address)
    return result


def _without_assistant(addresses: list[str], assistant_address: str) -> list[str]:
    assistant = canonical_address(assistant_address)
    return [a for a in addresses if canonical_address(a) != assistant]


def _encode_list(addresses: list[str]) -> bytes:
    if not addresses:
        return EMPTY_VALUE
    return encode_addresses(addresses)


def build_save_payload(
    snapshot: ConfigurationSnapshot,
    assistant_address: str,
    field_values: dict,
    supported_transaction_types: list[str] = SUPPORTED_TRANSACTION_TYPES,
    field_schema: list[dict] = TIP_ASSISTANT_CONFIG,
) -> tuple[list[str], list[bytes]]:
    """
    Compute the setDataBatch arguments that activate the assistant.

    Returns:
        (keys, values) ordered as [type keys..., executive key]
    """
    keys: list[str] = []
    values: list[bytes] = []

    for type_id in supported_transaction_types:
        current = snapshot.type_config_addresses.get(type_id, [])
        keys.append(type_config_key(type_id))
        values.append(_encode_list(_with_assistant(current, assistant_address)))

    keys.append(executive_config_key(assistant_address))
    values.append(encode_fields(field_values, field_schema))
    return keys, values


def build_deactivate_payload(
    snapshot: ConfigurationSnapshot,
    assistant_address: str,
    supported_transaction_types: list[str] = SUPPORTED_TRANSACTION_TYPES,
) -> tuple[list[str], list[bytes]]:
    """
    Compute the setDataBatch arguments that remove the assistant entirely.

    Removing an assistant that is not subscribed is a no-op for that list.
    """
    keys: list[str] = []
    values: list[bytes] = []

    for type_id in supported_transaction_types:
        current = snapshot.type_config_addresses.get(type_id, [])
        keys.append(type_config_key(type_id))
        values.append(_encode_list(_without_assistant(current, assistant_address)))

    keys.append(executive_config_key(assistant_address))
    values.append(EMPTY_VALUE)
    return keys, values


async def submit_data_batch(store, up_address: str, keys: list[str], values: list[bytes]) -> dict:
    """
    Submit one setDataBatch and wait for its receipt.

    Returns:
        dict: {tx_hash, block_number, data_keys, data_values}
    """
    if len(keys) != len(values):
        raise ValueError(f"setDataBatch needs one value per key ({len(keys)} keys, {len(values)} values)")

    tx_hash = await run_blocking(store.set_data_batch, up_address, keys, values)
    receipt = await run_blocking(store.wait_for_confirmation, tx_hash)

    return {
        "tx_hash": tx_hash,
        "block_number": receipt.get("blockNumber"),
        "data_keys": keys,
        "data_values": ["0x" + value.hex() for value in values],
    }


async def save_assistant_config(
    store,
    up_address: str,
    assistant_address: str,
    field_values: dict,
    supported_transaction_types: list[str] = SUPPORTED_TRANSACTION_TYPES,
    field_schema: list[dict] = TIP_ASSISTANT_CONFIG,
) -> dict:
    """
    Subscribe the assistant to every supported type and store its fields.

    1. Re-reads the profile (never trusts a cached snapshot)
    2. Adds the assistant to each type list if missing
    3. Encodes field_values for the executive key
    4. Submits one setDataBatch and waits for confirmation

    Args:
        store: Remote ERC725Y store
        up_address: Universal Profile being configured
        assistant_address: Assistant to activate
        field_values: {name: raw value}, already validated by the caller

    Returns:
        dict: {tx_hash, block_number, state, data_keys, data_values}
    """
    snapshot = await fetch_assistant_config(
        store, up_address, assistant_address, supported_transaction_types, field_schema,
        tolerate_unreadable_fields=True,
    )
    previous = snapshot.state
    transition = AssistantState.RECONFIGURING if previous == AssistantState.ACTIVE else AssistantState.CONFIGURING
    logger.info(f"Assistant {assistant_address} on {up_address}: {previous.value} -> {transition.value}")

    keys, values = build_save_payload(
        snapshot, assistant_address, field_values, supported_transaction_types, field_schema
    )
    result = await submit_data_batch(store, up_address, keys, values)

    logger.info(f"Assistant {assistant_address} on {up_address}: {transition.value} -> ACTIVE")
    return {**result, "state": AssistantState.ACTIVE.value}


async def deactivate_assistant(
    store,
    up_address: str,
    assistant_address: str,
    supported_transaction_types: list[str] = SUPPORTED_TRANSACTION_TYPES,
    field_schema: list[dict] = TIP_ASSISTANT_CONFIG,
) -> dict:
    """
    Unsubscribe the assistant from every type and clear its fields.

    Returns:
        dict: {tx_hash, block_number, state, data_keys, data_values}
    """
    snapshot = await fetch_assistant_config(
        store, up_address, assistant_address, supported_transaction_types, field_schema,
        tolerate_unreadable_fields=True,
    )
    logger.info(
        f"Assistant {assistant_address} on {up_address}: "
        f"{snapshot.state.value} -> {AssistantState.DEACTIVATING.value}"
    )

    keys, values = build_deactivate_payload(snapshot, assistant_address, supported_transaction_types)
    result = await submit_data_batch(store, up_address, keys, values)

    logger.info(f"Assistant {assistant_address} on {up_address}: DEACTIVATING -> NOT_CONFIGURED")
    return {**result, "state": AssistantState.NOT_CONFIGURED.value}
