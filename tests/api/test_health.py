import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from medassist.api.deps import get_service_cache
from medassist.api.main import create_app


class _EngineOnlyCache:
    def __init__(self, url: str) -> None:
        self.engine = create_async_engine(url)


@pytest.fixture
def app():
    return create_app()


def test_health_check(app):
    response = TestClient(app).get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"status": "healthy", "message": "Server Healthy"},
    }


def test_health_check_db(app, tmp_path):
    app.dependency_overrides[get_service_cache] = lambda: _EngineOnlyCache(
        f"sqlite+aiosqlite:///{tmp_path / 'health.db'}"
    )

    response = TestClient(app).get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"status": "healthy", "message": "Database connection OK"},
    }


def test_health_check_db_unavailable(app, tmp_path):
    app.dependency_overrides[get_service_cache] = lambda: _EngineOnlyCache(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'health.db'}"
    )

    response = TestClient(app).get("/api/v1/health/db")

    assert response.status_code == 503
    assert response.json() == {"success": False, "message": "Database unavailable", "error": "STORAGE_ERROR"}
