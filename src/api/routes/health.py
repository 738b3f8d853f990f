"""
Health check API route
"""

from datetime import datetime
from fastapi import APIRouter, HTTPException
from database.document_store import get_document_store

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check - reports whether the document store answers"""
    store = get_document_store()

    try:
        await store.ping()

        return {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat(),
            "database": "connected"
        }

    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")
