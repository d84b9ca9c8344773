"""Debug router.

This router is only included when ENVIRONMENT != production.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

router = APIRouter(prefix="/debug", tags=["debug"])


class FailRequest(BaseModel):
    reason: str = Field(min_length=1)


@router.post("/fail")
async def fail(payload: FailRequest) -> None:
    # Crash on purpose so the unhandled-error path can be checked end to end.
    raise RuntimeError(payload.reason)
