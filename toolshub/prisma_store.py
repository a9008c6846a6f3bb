"""MongoDB collections backed by Prisma Client Python.

``connect_prisma`` requires ``prisma generate`` against ``schema.prisma``;
``Database.connect`` falls back to memory if that fails.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fastapi.encoders import jsonable_encoder
from prisma.fields import Json

from .database import Collection, Query
from .errors import InvalidIdentifierError

logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


class PrismaCollection(Collection):
    def __init__(self, name: str, actions: Any, json_fields: Iterable[str] = ()):
        self.name = name
        self._actions = actions
        self._json_fields = tuple(json_fields)

    def _check_id(self, record_id: str) -> None:
        if not OBJECT_ID_PATTERN.match(record_id or ""):
            raise InvalidIdentifierError(f"Invalid {self.name} id format")

    @staticmethod
    def _where(query: Query) -> Dict[str, Any]:
        where: Dict[str, Any] = dict(query.where)
        if query.search:
            where["OR"] = [
                {name: {"contains": query.search, "mode": "insensitive"}}
                for name in query.search_fields
            ]
        if query.time_range:
            where[query.time_range.field] = {"gte": query.time_range.start, "lt": query.time_range.end}
        return where

    @staticmethod
    def _to_record(model: Any) -> Optional[Dict[str, Any]]:
        return model.model_dump() if model is not None else None

    def _to_data(self, record: Dict[str, Any]) -> Dict[str, Any]:
        data = {key: value for key, value in record.items() if key != "id"}
        for name in self._json_fields:
            if name in data:
                data[name] = Json(jsonable_encoder(data[name]))
        return data

    async def find(self, query: Optional[Query] = None) -> List[Dict[str, Any]]:
        query = query or Query()
        order = {query.sort[0]: query.sort[1]} if query.sort else None
        models = await self._actions.find_many(
            where=self._where(query),
            order=order,
            skip=query.skip or None,
            take=query.limit,
        )
        return [self._to_record(model) for model in models]

    async def count(self, query: Optional[Query] = None) -> int:
        return await self._actions.count(where=self._where(query or Query()))

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        self._check_id(record_id)
        return self._to_record(await self._actions.find_unique(where={"id": record_id}))

    async def find_one(self, **equals: Any) -> Optional[Dict[str, Any]]:
        return self._to_record(await self._actions.find_first(where=equals))

    async def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        model = await self._actions.create(data=self._to_data(self.with_defaults(record)))
        return self._to_record(model)

    async def update_by_id(self, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._check_id(record_id)
        model = await self._actions.update(where={"id": record_id}, data=self._to_data(changes))
        return self._to_record(model)

    async def update_counter_by_id(self, record_id: str, field_name: str, delta: int = 1) -> Optional[Dict[str, Any]]:
        self._check_id(record_id)
        model = await self._actions.update(
            where={"id": record_id},
            data={field_name: {"increment": delta}},
        )
        return self._to_record(model)


async def connect_prisma(url: str) -> Any:
    """Connect a Prisma client and ping the database with a cheap count.

    The generated client exists only after ``prisma generate``.
    """
    from prisma import Prisma

    client = Prisma(datasource={"url": url})
    try:
        await client.connect()
        await client.tool.count()
    except BaseException:
        if client.is_connected():
            await client.disconnect()
        raise
    return client


def prisma_collections(client: Any) -> Tuple[PrismaCollection, PrismaCollection, PrismaCollection, PrismaCollection]:
    """Return the tools, users, urls and analytics collections for a connected client."""
    return (
        PrismaCollection("tools", client.tool),
        PrismaCollection("users", client.user, json_fields=("favorites", "recentTools", "preferences")),
        PrismaCollection("urls", client.shorturl),
        PrismaCollection("analytics", client.analyticsevent),
    )
