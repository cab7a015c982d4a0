import os
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    应用配置管理
    使用 .env 文件加载环境变量，支持默认值
    """
    # Database - SQLite 数据库路径
    # 默认使用本地相对路径，Docker 环境可通过环境变量覆盖
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/serptrack.db"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # 访问 API 所需的密钥，为空时拒绝所有请求
    API_KEY: str = ""

    # Scraper
    SCRAPER_TYPE: str = ""
    SCRAPING_API: str = ""
    REQUEST_TIMEOUT: int = 30

    # 排名刷新
    REFRESH_CRON_HOUR: int = 3
    SCHEDULER_ENABLED: bool = True

    # Search Console 本地数据目录
    DATA_DIR: str = "./data"
    SEARCH_CONSOLE_CLIENT_EMAIL: str = ""
    SEARCH_CONSOLE_PRIVATE_KEY: str = ""

    # CORS - 允许的域名列表，多个域名用逗号分隔
    ALLOWED_ORIGINS: str = "http://localhost:8000,http://127.0.0.1:8000"

    class Config:
        env_file = os.path.join(os.path.dirname(__file__), "..", ".env")
        env_file_encoding = "utf-8"


@lru_cache()  # 缓存配置，避免重复加载
def get_settings() -> Settings:
    """
    获取应用配置实例
    使用方法：from serptrack.config import settings
    """
    return Settings()


# 全局配置实例
settings = get_settings()
