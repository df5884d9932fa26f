import logging
from typing import Any, Dict

from fastapi import APIRouter
from tortoise import connections

from ..config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def health_check() -> Dict[str, Any]:
    """Liveness plus a round trip to the credential store."""
    try:
        await connections.get("default").execute_query("SELECT 1")
        database = "connected"
    except Exception:
        logger.exception("Credential store unreachable")
        database = "disconnected"

    return {
        "status": "ok" if database == "connected" else "degraded",
        "version": settings.APP_VERSION,
        "database": database,
    }
