import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient

from jaggle_grids.config import Settings
from jaggle_grids.core.database import create_db_engine, create_session_factory, create_tables
from jaggle_grids.main import create_app


class FakeClock:
    """Callable clock that tests move forward by hand"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def db_session():
    engine = create_db_engine("sqlite://")
    create_tables(engine)
    SessionLocal = create_session_factory(engine)
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()
        engine.dispose()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0))


@pytest.fixture
def app():
    return create_app(Settings(DATABASE_URL="sqlite://", CORS_ORIGINS=["http://localhost:5173"]))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    """Log in through the API and return (headers, response body)"""
    def _login(email: str = "a@x.com", name: str = "A"):
        resp = client.post("/api/auth/login", json={"email": email, "name": name})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body
    return _login
