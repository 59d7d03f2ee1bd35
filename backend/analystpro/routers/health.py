from fastapi import APIRouter

from ..core.config import settings

router = APIRouter(tags=["health"])

@router.get("", summary="Liveness check")
def health():
    return {"status": "ok", "env": settings.env}
