import json
import os

# 测试环境配置需在导入应用前设置
os.environ["API_KEY"] = "test-api-key"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SCRAPER_TYPE"] = ""
os.environ["SEARCH_CONSOLE_CLIENT_EMAIL"] = ""
os.environ["SEARCH_CONSOLE_PRIVATE_KEY"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

DATABASE_URL = "sqlite+aiosqlite:///:memory:"
AUTH_HEADERS = {"Authorization": "Bearer test-api-key"}


@pytest_asyncio.fixture
async def engine():
    from serptrack.models import Base

    test_engine = create_async_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    TestingSessionLocal = sessionmaker(
        class_=AsyncSession,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def enqueued(monkeypatch):
    """记录交给刷新队列的关键词 ID，不真正启动刷新"""
    from serptrack.services.refresh_service import refresh_queue

    calls = []
    monkeypatch.setattr(refresh_queue, "enqueue", lambda ids: calls.append(list(ids)))
    return calls


@pytest_asyncio.fixture
async def client(db_session, enqueued):
    from serptrack.main import app
    from serptrack.models import get_db

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers=AUTH_HEADERS) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_keyword(db_session):
    from serptrack.models import Keyword

    async def _make_keyword(**overrides):
        values = {
            "keyword": "best running shoes",
            "device": "desktop",
            "country": "US",
            "city": "",
            "domain": "example.com",
            "position": 0,
            "history": json.dumps({}),
            "tags": json.dumps([]),
            "url": "",
            "sticky": False,
            "updating": False,
        }
        for key in ("history", "tags", "last_result"):
            if key in overrides and not isinstance(overrides[key], str):
                overrides[key] = json.dumps(overrides[key])
        values.update(overrides)

        keyword = Keyword(**values)
        db_session.add(keyword)
        await db_session.commit()
        await db_session.refresh(keyword)
        return keyword

    return _make_keyword
