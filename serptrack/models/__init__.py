from serptrack.models.database import Base, async_engine, get_db, init_db, AsyncSessionLocal
from serptrack.models.keyword import Keyword
from serptrack.models.app_settings import AppSettings

__all__ = [
    "Base",
    "async_engine",
    "get_db",
    "init_db",
    "AsyncSessionLocal",
    "Keyword",
    "AppSettings",
]
