from fastapi import APIRouter, Depends

from .. import reporting
from ..database import Database, get_db
from ..schemas import TrackRequest, TrackResponse

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("")
async def overview(db: Database = Depends(get_db)):
    return await reporting.overview(db)


@router.get("/daily")
async def daily(db: Database = Depends(get_db)):
    return await reporting.daily_summary(db)


@router.get("/weekly")
async def weekly(db: Database = Depends(get_db)):
    return await reporting.weekly_summary(db)


@router.get("/monthly")
async def monthly(db: Database = Depends(get_db)):
    return await reporting.monthly_summary(db)


@router.get("/engagement")
async def engagement(db: Database = Depends(get_db)):
    return await reporting.engagement(db)


@router.get("/tools/{tool_id}")
async def tool_stats(tool_id: str, db: Database = Depends(get_db)):
    return await reporting.tool_stats(db, tool_id)


@router.post("/track", response_model=TrackResponse)
async def track(payload: TrackRequest, db: Database = Depends(get_db)):
    """Track a page view or interaction"""
    record, total = await reporting.record_event(
        db,
        payload.ip,
        tool_id=payload.toolId,
        user_id=payload.userId,
        user_agent=payload.userAgent,
        action=payload.action,
    )
    return {"message": "Analytics data recorded successfully", "totalVisits": total, "recordId": record["id"]}
