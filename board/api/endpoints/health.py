import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from board.db.async_session import check_async_database_health, get_async_db_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def health_check():
    """Liveness plus a database round trip."""
    try:
        manager = await get_async_db_manager()
        connection_test = await manager.test_connection()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")

    return {
        "status": "healthy" if connection_test else "unhealthy",
        "database": "connected" if connection_test else "disconnected",
        "service": "board-backend",
    }


@router.get("/database", response_model=Dict[str, Any])
async def database_health_check():
    """Database health with connection pool information."""
    try:
        return await check_async_database_health()
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        raise HTTPException(status_code=503, detail=f"Database health check failed: {str(e)}")
