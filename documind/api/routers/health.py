"""
Health check endpoint.

Dependencies: fastapi
System role: Liveness probe
"""

from fastapi import APIRouter

from documind import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}
