"""Health check endpoint."""

from fastapi import APIRouter

from cineticket import __version__

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Liveness check; does not touch the database."""
    return {"status": "ok", "service": "cineticket", "version": __version__}
