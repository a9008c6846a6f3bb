from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from .. import catalog
from ..auth import current_user
from ..database import Database, get_db
from ..schemas import MessageResponse, ToolListResponse, ToolResponse, UsageResponse

router = APIRouter(prefix="/api/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse)
async def list_tools(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: Database = Depends(get_db),
):
    return await catalog.list_tools(db, category=category, search=search, page=page, limit=limit)


# Fixed paths come before /{tool_id}
@router.get("/popular", response_model=List[ToolResponse])
@router.get("/popular/{limit}", response_model=List[ToolResponse])
async def popular_tools(limit: int = 10, db: Database = Depends(get_db)):
    return await catalog.popular_tools(db, limit=max(limit, 1))


@router.get("/category/{category}", response_model=List[ToolResponse])
async def tools_by_category(category: str, db: Database = Depends(get_db)):
    return await catalog.tools_by_category(db, category)


@router.post("/record-usage/{tool_id}", response_model=UsageResponse, status_code=201)
async def record_usage(tool_id: str, db: Database = Depends(get_db)):
    tool = await catalog.record_usage(db, tool_id)
    return {"message": "Usage recorded successfully", "tool": tool}


@router.post("/{tool_id}/deactivate", response_model=MessageResponse)
async def deactivate_tool(
    tool_id: str,
    db: Database = Depends(get_db),
    user: Dict[str, Any] = Depends(current_user),
):
    await catalog.deactivate_tool(db, tool_id)
    return {"message": "Tool deactivated"}


@router.get("/{tool_id}", response_model=ToolResponse)
async def get_tool(tool_id: str, db: Database = Depends(get_db)):
    return await catalog.get_tool(db, tool_id)
