"""
Pydantic models for request/response validation.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Union


class AssistantBase(BaseModel):
    """Shared base; allows construction by Python name or alias."""
    model_config = ConfigDict(populate_by_name=True)


# ── Assistant Config ────────────────────────────────────────────────

class TipConfigRequest(AssistantBase):
    """Desired Tip Assistant settings for a profile."""
    tip_address: str = Field(
        ...,
        alias="tipAddress",
        description="Destination that receives the tipped share of incoming LYX",
    )
    tip_amount: Union[str, int] = Field(
        ...,
        alias="tipAmount",
        description="Whole percentage between 1 and 100",
    )


class AssistantConfigResponse(AssistantBase):
    """Decoded configuration snapshot."""
    assistant_address: str = Field(..., alias="assistantAddress")
    type_config_addresses: Dict[str, List[str]] = Field(..., alias="typeConfigAddresses")
    selected_config_types: List[str] = Field(..., alias="selectedConfigTypes")
    is_subscribed_to_assistant: bool = Field(..., alias="isSubscribedToAssistant")
    field_values: Optional[Dict[str, str]] = Field(default=None, alias="fieldValues")
    state: str


class WriteResultResponse(AssistantBase):
    """Outcome of a confirmed setDataBatch."""
    tx_hash: Optional[str] = Field(default=None, alias="txHash")
    block_number: Optional[int] = Field(default=None, alias="blockNumber")
    state: Optional[str] = None
    data_keys: List[str] = Field(default_factory=list, alias="dataKeys")
    data_values: List[str] = Field(default_factory=list, alias="dataValues")
    already_installed: Optional[bool] = Field(default=None, alias="alreadyInstalled")


class InstallationStatusResponse(AssistantBase):
    """Whether the UAP receiver delegate is installed on the profile."""
    up_address: str = Field(..., alias="upAddress")
    protocol_address: str = Field(..., alias="protocolAddress")
    installed: bool
