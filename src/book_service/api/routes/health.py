"""
Health check API route
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from book_service.database.connection import Database, get_database

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """Report healthy when the database answers a trivial query"""
    try:
        await database.ping()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected"
    }
