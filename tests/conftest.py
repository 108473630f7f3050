"""Pytest configuration and shared fixtures for tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from costura.database import make_engine
from costura.main import app, get_storage
from costura.storage import JsonStorage, SqlStorage, Storage


@pytest.fixture(params=["json", "sql"])
def storage(request: pytest.FixtureRequest, tmp_path) -> Storage:
    """Fresh storage for each backend.

    Every test using this fixture runs once against JSON files in a temp
    directory and once against an in-memory SQLite database.
    """
    if request.param == "json":
        backend: Storage = JsonStorage(tmp_path / "data")
    else:
        backend = SqlStorage(make_engine("sqlite://", poolclass=StaticPool))
    backend.setup()
    return backend


@pytest.fixture
def json_storage(tmp_path) -> JsonStorage:
    backend = JsonStorage(tmp_path / "data")
    backend.setup()
    return backend


@pytest.fixture
def client(storage: Storage) -> Iterator[TestClient]:
    """Test client wired to the parametrized storage."""
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
