"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from cfc.config import get_settings
from cfc.database import get_store
from cfc.db.store import Store

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe, 200 while the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    store: Store = Depends(get_store),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe: checks the storage backend."""
    checks: dict[str, object] = {}

    try:
        await store.ping()
        checks["store"] = "ok"
    except Exception as exc:
        checks["store"] = f"error: {exc}"

    all_ok = all(v == "ok" for v in checks.values())
    return {
        "status": "ready" if all_ok else "degraded",
        "backend": get_settings().storage_backend,
        "checks": checks,
    }


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version and environment."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
