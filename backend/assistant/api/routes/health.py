"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running), plus the active store backend
    """
    backend = "sql" if request.app.state.settings.database_url else "memory"
    return {"status": "ok", "store": backend}
