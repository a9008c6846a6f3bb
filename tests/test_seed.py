import pytest

from toolshub.database import Database
from toolshub.seed import seed_tools

pytestmark = pytest.mark.anyio


async def test_seed_inserts_missing_tools_once():
    db = Database(seed_tools=False)

    assert await seed_tools(db) == 48
    assert await db.tools.count() == 48
    assert await seed_tools(db) == 0
    assert await db.tools.count() == 48
