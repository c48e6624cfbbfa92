"""
Tip Assistant endpoints: read, save and deactivate the assistant config,
plus the UAP installation and controller-permission prerequisites.

Writes are signed by the backend's controller key and wait for the receipt
before responding.
"""
import logging

from fastapi import APIRouter, Depends

from config import settings
from deps import get_assistant_address, get_protocol_address, get_store, require_controller
from domain.constants import SUPPORTED_TRANSACTION_TYPES, TIP_ASSISTANT_CONFIG
from domain.errors import BlockchainError, ValidationError
from domain.responses import StandardErrorResponse, success_response
from exceptions import (
    CapacityExceededError,
    InvalidInputError,
    MalformedDataError,
    RemoteReadError,
    RemoteWriteError,
)
from middleware.rate_limit import rate_limit
from models import (
    AssistantConfigResponse,
    InstallationStatusResponse,
    TipConfigRequest,
    WriteResultResponse,
)
from services import config_service, installation_service, permission_service, reconcile_service
from utils.validators import (
    validate_evm_address,
    validate_tip_destination,
    validate_tip_percentage,
    validated_up_address,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/assistant",
    tags=["assistant"],
    responses={
        400: {"model": StandardErrorResponse},
        502: {"model": StandardErrorResponse},
        503: {"model": StandardErrorResponse},
    },
)


def _to_http_error(e: Exception, action: str) -> Exception:
    """Map core exceptions onto domain HTTP errors."""
    if isinstance(e, (InvalidInputError, CapacityExceededError)):
        return ValidationError(str(e))
    if isinstance(e, MalformedDataError):
        logger.error(f"{action}: stored data is malformed: {e}")
        return BlockchainError("Profile holds malformed assistant data", details={"reason": str(e)})
    if isinstance(e, RemoteWriteError):
        logger.error(f"{action}: write failed: {e}")
        return BlockchainError("Transaction failed; no configuration was changed")
    logger.error(f"{action}: read failed: {e}")
    return BlockchainError("Could not read profile storage")


def _write_result(result: dict) -> dict:
    return WriteResultResponse(**result).model_dump(by_alias=True, exclude_none=True)


# ── GET /assistant/info ────────────────────────────────────────────

@router.get("/info")
async def get_assistant_info(assistant_address: str = Depends(get_assistant_address)):
    """Network, assistant deployment and field schema served to the widget."""
    return success_response({
        "chainId": settings.chain_id,
        "assistantAddress": assistant_address,
        "supportedTransactionTypes": SUPPORTED_TRANSACTION_TYPES,
        "fieldSchema": TIP_ASSISTANT_CONFIG,
    })


# ── GET /assistant/{up_address}/config ─────────────────────────────

@router.get("/{up_address}/config")
async def get_config(
    up_address: str = Depends(validated_up_address),
    assistant_address: str = Depends(get_assistant_address),
    store=Depends(get_store),
):
    """Current subscription and tip settings stored on the profile."""
    try:
        snapshot = await config_service.fetch_assistant_config(store, up_address, assistant_address)
    except (MalformedDataError, RemoteReadError) as e:
        raise _to_http_error(e, f"Reading config of {up_address}")
    data = AssistantConfigResponse(**snapshot.to_dict()).model_dump(by_alias=True)
    return success_response(data)


# ── PUT /assistant/{up_address}/config ─────────────────────────────

@router.put("/{up_address}/config")
async def save_config(
    request: TipConfigRequest,
    up_address: str = Depends(validated_up_address),
    assistant_address: str = Depends(get_assistant_address),
    store=Depends(get_store),
    _controller=Depends(require_controller),
    _rate=Depends(rate_limit()),
):
    """
    Activate (or reconfigure) the Tip Assistant.

    Validates the tip settings, then re-reads, merges and writes both keys
    in one transaction.
    """
    tip_amount = validate_tip_percentage(request.tip_amount)
    tip_address = validate_tip_destination(request.tip_address, up_address)

    logger.info(f"Saving tip config for {up_address}: {tip_amount}% -> {tip_address}")
    try:
        result = await reconcile_service.save_assistant_config(
            store,
            up_address,
            assistant_address,
            {"tipAddress": tip_address, "tipAmount": tip_amount},
        )
    except (InvalidInputError, CapacityExceededError, MalformedDataError, RemoteReadError, RemoteWriteError) as e:
        raise _to_http_error(e, f"Saving config of {up_address}")
    return success_response(_write_result(result))


# ── DELETE /assistant/{up_address}/config ──────────────────────────

@router.delete("/{up_address}/config")
async def deactivate_config(
    up_address: str = Depends(validated_up_address),
    assistant_address: str = Depends(get_assistant_address),
    store=Depends(get_store),
    _controller=Depends(require_controller),
    _rate=Depends(rate_limit()),
):
    """Unsubscribe the assistant from every type and clear its settings."""
    try:
        result = await reconcile_service.deactivate_assistant(store, up_address, assistant_address)
    except (MalformedDataError, RemoteReadError, RemoteWriteError) as e:
        raise _to_http_error(e, f"Deactivating assistant on {up_address}")
    return success_response(_write_result(result))


# ── /assistant/{up_address}/installation ───────────────────────────

@router.get("/{up_address}/installation")
async def get_installation(
    up_address: str = Depends(validated_up_address),
    protocol_address: str = Depends(get_protocol_address),
    store=Depends(get_store),
):
    """Whether the profile's receiver delegate is the UAP protocol."""
    try:
        installed = await installation_service.is_installed(store, up_address, protocol_address)
    except RemoteReadError as e:
        raise _to_http_error(e, f"Checking installation on {up_address}")
    data = InstallationStatusResponse(
        up_address=up_address, protocol_address=protocol_address, installed=installed
    ).model_dump(by_alias=True)
    return success_response(data)


@router.post("/{up_address}/installation")
async def install(
    up_address: str = Depends(validated_up_address),
    protocol_address: str = Depends(get_protocol_address),
    store=Depends(get_store),
    _controller=Depends(require_controller),
    _rate=Depends(rate_limit()),
):
    """Point the profile's receiver delegate at the UAP protocol."""
    try:
        result = await installation_service.install_protocol(store, up_address, protocol_address)
    except (RemoteReadError, RemoteWriteError) as e:
        raise _to_http_error(e, f"Installing UAP on {up_address}")
    return success_response(_write_result(result))


# ── POST /assistant/{up_address}/permissions/{controller_address} ──

@router.post("/{up_address}/permissions/{controller_address}")
async def grant_permissions(
    controller_address: str,
    up_address: str = Depends(validated_up_address),
    store=Depends(get_store),
    _controller=Depends(require_controller),
    _rate=Depends(rate_limit()),
):
    """Grant a controller the default plus UAP receiver-delegate permissions."""
    controller = validate_evm_address(controller_address, field="controller_address")
    try:
        result = await permission_service.grant_controller_permissions(store, up_address, controller)
    except RemoteWriteError as e:
        raise _to_http_error(e, f"Granting permissions on {up_address}")
    return success_response(_write_result(result))
