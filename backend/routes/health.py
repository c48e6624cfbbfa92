"""
Health check endpoint.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from config import settings
from deps import get_store
from exceptions import RemoteReadError
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(store=Depends(get_store)):
    """Health check: verifies LUKSO RPC connectivity."""
    try:
        block_number = await run_blocking(store.block_number)
        return {
            "status": "healthy",
            "rpc_connected": True,
            "chain_id": settings.chain_id,
            "environment": settings.environment,
            "last_block": block_number,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    except RemoteReadError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "rpc_connected": False,
                "chain_id": settings.chain_id,
                "error": "RPC endpoint unreachable",
            },
        )
