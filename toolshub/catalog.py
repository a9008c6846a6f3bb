"""Tool catalog: listing, search, popularity counters."""
import logging
import math
from typing import Any, Dict, List, Optional

from .database import Database, Query
from .errors import InvalidInputError, NotFoundError
from .seed_data import CATEGORIES

logger = logging.getLogger(__name__)

BY_POPULARITY = ("popularity", "desc")


def _check_category(category: str) -> None:
    if category not in CATEGORIES:
        raise InvalidInputError(f"Unknown category: {category}")


async def list_tools(
    db: Database,
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 12,
) -> Dict[str, Any]:
    """List active tools, most popular first, one page at a time.

    ``search`` matches case-insensitively anywhere in the name or description.
    """
    if page < 1 or limit < 1:
        raise InvalidInputError("page and limit must be positive")

    where: Dict[str, Any] = {"isActive": True}
    if category:
        _check_category(category)
        where["category"] = category

    query = Query(where=where, search=search or None, sort=BY_POPULARITY, skip=(page - 1) * limit, limit=limit)
    total = await db.tools.count(query)
    tools = await db.tools.find(query)

    return {
        "tools": tools,
        "total": total,
        "totalPages": math.ceil(total / limit),
        "currentPage": page,
    }


async def get_tool(db: Database, tool_id: str) -> Dict[str, Any]:
    tool = await db.tools.find_by_id(tool_id)
    if not tool or not tool["isActive"]:
        raise NotFoundError("Tool not found")
    return tool


async def tools_by_category(db: Database, category: str) -> List[Dict[str, Any]]:
    _check_category(category)
    return await db.tools.find(Query(where={"category": category, "isActive": True}, sort=BY_POPULARITY))


async def popular_tools(db: Database, limit: int = 10) -> List[Dict[str, Any]]:
    return await db.tools.find(Query(where={"isActive": True}, sort=BY_POPULARITY, limit=limit))


async def record_usage(db: Database, tool_id: str) -> Dict[str, Any]:
    """Add one to the tool's popularity and return the updated tool."""
    tool = await db.tools.update_counter_by_id(tool_id, "popularity", 1)
    if tool is None:
        raise NotFoundError("Tool not found")
    return tool


async def deactivate_tool(db: Database, tool_id: str) -> Dict[str, Any]:
    tool = await db.tools.update_by_id(tool_id, {"isActive": False})
    if tool is None:
        raise NotFoundError("Tool not found")
    logger.info("[CATALOG] Tool %s deactivated", tool_id)
    return tool
