from datetime import datetime, timezone

from fastapi import APIRouter

from api.deps import StoreDep
from config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(store: StoreDep):
    settings = get_settings()
    status = store.describe()
    return {
        "status": "degraded" if status["degraded"] else "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
        "storage": status,
    }
