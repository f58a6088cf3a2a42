import pytest
import os
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy.pool import StaticPool

from fieldtasks.main import create_app
from fieldtasks.models.base import Base
from fieldtasks.db.session import create_tables
from fieldtasks.core.config import Settings
from fieldtasks.core.security import create_access_token
from fieldtasks.core.enums import UserRole


TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:"
)

TEST_JWT_SECRET = "test-secret"
TEST_ORIGIN = "http://dashboard.test"


@pytest.fixture
def app_settings():
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        JWT_SECRET=TEST_JWT_SECRET,
        BCRYPT_ROUNDS=4,
        ALLOWED_ORIGIN=TEST_ORIGIN,
        LOG_LEVEL="WARNING",
        _env_file=None,
    )


@pytest.fixture
async def app(app_settings):
    engine_kwargs = {}
    if TEST_DATABASE_URL.startswith("sqlite"):
        # every session must share the single :memory: connection
        engine_kwargs["poolclass"] = StaticPool

    application = create_app(app_settings, **engine_kwargs)
    await create_tables(application.state.engine)

    yield application

    async with application.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await application.state.engine.dispose()


@pytest.fixture
async def test_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(app):
    async with app.state.sessionmaker() as session:
        yield session


@pytest.fixture
def manager_token(app_settings):
    return create_access_token("1", UserRole.MANAGER, app_settings)


@pytest.fixture
def technician_token(app_settings):
    return create_access_token("2", UserRole.TECHNICIAN, app_settings)


@pytest.fixture
def manager_headers(manager_token):
    return {"Authorization": f"Bearer {manager_token}"}


@pytest.fixture
def technician_headers(technician_token):
    return {"Authorization": f"Bearer {technician_token}"}


@pytest.fixture
def expired_token():
    payload = {
        "sub": "1",
        "role": UserRole.MANAGER.value,
        "exp": datetime.now(timezone.utc) - timedelta(hours=1)  # Expired 1 hour ago
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def valid_task_data():
    return {
        "title": "Replace access point",
        "description": "Second floor AP keeps dropping clients",
        "client": "Acme",
    }


@pytest.fixture
def signup_factory(test_client):
    async def _signup(email="tech@example.com", password="pw", name="Tech", role="TECHNICIAN"):
        response = await test_client.post("/api/auth/signup", json={
            "email": email,
            "password": password,
            "name": name,
            "role": role,
        })
        return response.json() if response.status_code == 201 else None

    return _signup


@pytest.fixture
def login_factory(test_client):
    async def _login(email, password):
        response = await test_client.post("/api/auth/login", json={"email": email, "password": password})
        return response.json() if response.status_code == 200 else None

    return _login


@pytest.fixture
def create_task_factory(test_client, manager_headers):
    async def _create_task(title="Test Task", client="Acme", **kwargs):
        data = {"title": title, "client": client}
        data.update(kwargs)

        response = await test_client.post("/api/tasks", json=data, headers=manager_headers)

        return response.json() if response.status_code == 201 else None

    return _create_task


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "auth: marks tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "crud: marks tests related to CRUD operations"
    )
