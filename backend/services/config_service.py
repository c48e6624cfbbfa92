"""
Config service: reads and decodes a profile's assistant configuration.

One getDataBatch call covers every UAPTypeConfig key plus the assistant's
UAPExecutiveConfig key; the result is a transient ConfigurationSnapshot.
"""
import logging
from dataclasses import dataclass, field

from domain.constants import SUPPORTED_TRANSACTION_TYPES, TIP_ASSISTANT_CONFIG
from domain.enums import AssistantState
from exceptions import MalformedDataError
from services.async_executor import run_blocking
from utils.codecs import canonical_address, decode_addresses, decode_fields, is_empty_value
from utils.data_keys import executive_config_key, type_config_key

logger = logging.getLogger(__name__)


@dataclass
class ConfigurationSnapshot:
    """Decoded view of the assistant's on-chain configuration for one profile."""

    assistant_address: str
    type_config_addresses: dict[str, list[str]] = field(default_factory=dict)
    selected_config_types: list[str] = field(default_factory=list)
    field_values: dict[str, str] | None = None
    field_values_unreadable: bool = False

    @property
    def is_subscribed(self) -> bool:
        return len(self.selected_config_types) > 0

    @property
    def state(self) -> AssistantState:
        if self.is_subscribed and self.field_values is not None:
            return AssistantState.ACTIVE
        return AssistantState.NOT_CONFIGURED

    def to_dict(self) -> dict:
        return {
            "assistantAddress": self.assistant_address,
            "typeConfigAddresses": self.type_config_addresses,
            "selectedConfigTypes": self.selected_config_types,
            "isSubscribedToAssistant": self.is_subscribed,
            "fieldValues": self.field_values,
            "state": self.state.value,
        }


def build_config_keys(assistant_address: str, supported_transaction_types: list[str]) -> list[str]:
    """Data keys for one read, in order: [type keys..., executive key]."""
    keys = [type_config_key(type_id) for type_id in supported_transaction_types]
    keys.append(executive_config_key(assistant_address))
    return keys


def decode_snapshot(
    values: list[bytes],
    assistant_address: str,
    supported_transaction_types: list[str],
    field_schema: list[dict],
    tolerate_unreadable_fields: bool = False,
) -> ConfigurationSnapshot:
    """
    Decode raw getDataBatch values into a snapshot.

    Args:
        values: One value per supported type, then the executive config value
        tolerate_unreadable_fields: Record an undecodable executive config value
            as unreadable instead of raising (writers replace it)

    Raises:
        MalformedDataError if the value count does not match the key count
            or a stored value does not decode
    """
    expected = len(supported_transaction_types) + 1
    if len(values) != expected:
        raise MalformedDataError(
            f"getDataBatch returned {len(values)} values for {expected} keys"
        )

    assistant = canonical_address(assistant_address)
    snapshot = ConfigurationSnapshot(assistant_address=assistant_address)

    for type_id, encoded in zip(supported_transaction_types, values):
        addresses = decode_addresses(encoded)
        snapshot.type_config_addresses[type_id] = addresses
        if any(canonical_address(a) == assistant for a in addresses):
            snapshot.selected_config_types.append(type_id)

    assistant_config_value = values[-1]
    if not is_empty_value(assistant_config_value):
        try:
            snapshot.field_values = decode_fields(assistant_config_value, field_schema)
        except MalformedDataError as e:
            if not tolerate_unreadable_fields:
                raise
            logger.warning(f"Assistant config of {assistant_address} is unreadable: {e}")
            snapshot.field_values_unreadable = True

    return snapshot


async def fetch_assistant_config(
    store,
    up_address: str,
    assistant_address: str,
    supported_transaction_types: list[str] = SUPPORTED_TRANSACTION_TYPES,
    field_schema: list[dict] = TIP_ASSISTANT_CONFIG,
    tolerate_unreadable_fields: bool = False,
) -> ConfigurationSnapshot:
    """
    Fetch and decode the assistant configuration stored on a profile.

    Args:
        store: Remote ERC725Y store (get_data_batch)
        up_address: Universal Profile being configured
        assistant_address: Assistant whose subscription and fields are read
        supported_transaction_types: Type ids the assistant can subscribe to
        field_schema: Ordered [{name, type}] schema of the executive config
        tolerate_unreadable_fields: See decode_snapshot

    Returns:
        ConfigurationSnapshot (read-only; store errors propagate)
    """
    keys = build_config_keys(assistant_address, supported_transaction_types)
    values = await run_blocking(store.get_data_batch, up_address, keys)
    snapshot = decode_snapshot(
        values, assistant_address, supported_transaction_types, field_schema, tolerate_unreadable_fields
    )
    logger.debug(
        f"Fetched assistant config for {up_address}: "
        f"subscribed={snapshot.is_subscribed}, configured={snapshot.field_values is not None}"
    )
    return snapshot
