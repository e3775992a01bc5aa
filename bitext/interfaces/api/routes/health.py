"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter

from bitext import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "bitext"}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "Bitext API",
        "version": __version__,
        "description": "Sentence-aligned Chinese/English translation with vocabulary",
        "docs": "/docs",
    }
