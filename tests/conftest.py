import os

# Tests always run against the in-memory store
os.environ["DATABASE_URL"] = ""
os.environ["TIMEZONE"] = ""

import pytest
from fastapi.testclient import TestClient

from toolshub.database import Database
from toolshub.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    return Database()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
