import os
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from serptrack.config import settings

# SQLite 等待写锁的秒数，刷新队列与接口会同时写关键词表
SQLITE_BUSY_TIMEOUT = 30

database_url = make_url(settings.DATABASE_URL)
is_sqlite = database_url.get_backend_name() == "sqlite"
is_file_sqlite = is_sqlite and database_url.database not in (None, "", ":memory:")

async_engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    connect_args={"timeout": SQLITE_BUSY_TIMEOUT} if is_sqlite else {},
)


if is_file_sqlite:
    @event.listens_for(async_engine.sync_engine, "connect")
    def enable_sqlite_wal(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


AsyncSessionLocal = sessionmaker(
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    bind=async_engine,
    expire_on_commit=False
)

Base = declarative_base()


async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """创建数据目录和数据表"""
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    if is_file_sqlite:
        db_dir = os.path.dirname(os.path.abspath(database_url.database))
        os.makedirs(db_dir, exist_ok=True)

    from serptrack.models import keyword, app_settings
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
