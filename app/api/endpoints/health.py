from datetime import datetime, timezone

from fastapi import APIRouter

from app.schemas.common import HealthOut

router = APIRouter()


@router.get("/health", response_model=HealthOut)
@router.get("/api/health", response_model=HealthOut, include_in_schema=False)
async def health() -> HealthOut:
    return HealthOut(status="ok", timestamp=datetime.now(timezone.utc))
