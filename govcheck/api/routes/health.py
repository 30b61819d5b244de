"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter

from govcheck.config import settings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "model": settings.govcheck_model,
        "version": "1.0.0",
    }
