"""Data access layer: one record-query interface over MongoDB (Prisma) or in-memory lists."""
import asyncio
import copy
import itertools
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from fastapi import Request

from .config import DATABASE_URL, DB_CONNECT_TIMEOUT
from .seed_data import default_tool_records

logger = logging.getLogger(__name__)


class TimeRange(NamedTuple):
    """Half-open ``[start, end)`` window on a datetime field."""

    field: str
    start: datetime
    end: datetime


@dataclass
class Query:
    """Filter, order and page window for ``Collection.find`` and ``Collection.count``."""

    where: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    search_fields: Tuple[str, ...] = ("name", "description")
    time_range: Optional[TimeRange] = None
    sort: Optional[Tuple[str, str]] = None
    skip: int = 0
    limit: Optional[int] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


# Field defaults applied on create, shared by both backends
COLLECTION_DEFAULTS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "tools": lambda: {
        "icon": "tool",
        "popularity": 0,
        "isActive": True,
        "createdAt": _now(),
    },
    "users": lambda: {
        "username": None,
        "email": None,
        "password": None,
        "favorites": [],
        "recentTools": [],
        "preferences": {"theme": "light", "language": "en"},
        "createdAt": _now(),
        "lastLogin": None,
        "isActive": True,
    },
    "urls": lambda: {
        "clicks": 0,
        "createdBy": "anonymous",
        "createdAt": _now(),
        "expiresAt": None,
        "isActive": True,
    },
    "analytics": lambda: {
        "toolId": None,
        "userId": None,
        "userAgent": None,
        "eventType": "view",
        "timestamp": _now(),
    },
}


class Collection:
    """Interface shared by the in-memory and Prisma collections."""

    name: str

    async def find(self, query: Optional[Query] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def count(self, query: Optional[Query] = None) -> int:
        raise NotImplementedError

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def find_one(self, **equals: Any) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def update_by_id(self, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def update_counter_by_id(self, record_id: str, field_name: str, delta: int = 1) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def with_defaults(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return {**COLLECTION_DEFAULTS[self.name](), **record}


# Timestamp-based ids, kept unique when several records are created in the same millisecond
_synthetic_ids = itertools.count(int(time.time() * 1000))


class MemoryCollection(Collection):
    """Process-local collection used when no database is reachable.

    Any string is accepted as an id; unknown ids simply miss.
    """

    def __init__(self, name: str, records: Optional[List[Dict[str, Any]]] = None):
        self.name = name
        self._records: List[Dict[str, Any]] = list(records or [])

    @staticmethod
    def _matches(record: Dict[str, Any], query: Query) -> bool:
        for key, value in query.where.items():
            if record.get(key) != value:
                return False

        if query.search:
            term = query.search.lower()
            if not any(term in str(record.get(name) or "").lower() for name in query.search_fields):
                return False

        if query.time_range:
            value = record.get(query.time_range.field)
            if value is None or not (query.time_range.start <= value < query.time_range.end):
                return False

        return True

    def _select(self, query: Query) -> List[Dict[str, Any]]:
        return [record for record in self._records if self._matches(record, query)]

    def _get(self, record_id: str) -> Optional[Dict[str, Any]]:
        return next((record for record in self._records if record["id"] == record_id), None)

    async def find(self, query: Optional[Query] = None) -> List[Dict[str, Any]]:
        query = query or Query()
        result = self._select(query)

        if query.sort:
            sort_field, direction = query.sort
            result.sort(key=lambda record: record.get(sort_field), reverse=direction == "desc")

        end = query.skip + query.limit if query.limit is not None else None
        return copy.deepcopy(result[query.skip:end])

    async def count(self, query: Optional[Query] = None) -> int:
        return len(self._select(query or Query()))

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._get(record_id))

    async def find_one(self, **equals: Any) -> Optional[Dict[str, Any]]:
        result = await self.find(Query(where=equals, limit=1))
        return result[0] if result else None

    async def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        new_record = self.with_defaults(record)
        new_record["id"] = str(next(_synthetic_ids))
        self._records.append(new_record)
        return copy.deepcopy(new_record)

    async def update_by_id(self, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        record = self._get(record_id)
        if record is None:
            return None
        record.update(copy.deepcopy(changes))
        return copy.deepcopy(record)

    async def update_counter_by_id(self, record_id: str, field_name: str, delta: int = 1) -> Optional[Dict[str, Any]]:
        record = self._get(record_id)
        if record is None:
            return None
        record[field_name] = record.get(field_name, 0) + delta
        return copy.deepcopy(record)


class Database:
    """Holds the four collection accessors and the active backend.

    Starts in fallback mode with the default catalog; ``connect`` switches to
    MongoDB when it is reachable.
    """

    def __init__(self, seed_tools: bool = True):
        self._client = None
        self._fallback_mode = True
        self.tools: Collection = MemoryCollection("tools", default_tool_records() if seed_tools else [])
        self.users: Collection = MemoryCollection("users")
        self.urls: Collection = MemoryCollection("urls")
        self.analytics_events: Collection = MemoryCollection("analytics")

    @property
    def fallback_mode(self) -> bool:
        return self._fallback_mode

    async def connect(self, url: Optional[str] = DATABASE_URL, timeout: float = DB_CONNECT_TIMEOUT) -> None:
        """Try to reach MongoDB; on any failure stay in fallback mode. Never raises."""
        if not url:
            logger.info("[DB] No DATABASE_URL configured")
            return

        try:
            from .prisma_store import connect_prisma, prisma_collections

            client = await asyncio.wait_for(connect_prisma(url), timeout=timeout)
        except Exception as e:
            logger.warning("[DB] Database connection failed: %s", e)
            logger.info("[DB] Switching to fallback mode with in-memory storage")
            return

        self._client = client
        self.tools, self.users, self.urls, self.analytics_events = prisma_collections(client)
        self._fallback_mode = False
        logger.info("[DB] Connected to MongoDB")

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.disconnect()
            self._client = None


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the database created at startup."""
    return request.app.state.db
