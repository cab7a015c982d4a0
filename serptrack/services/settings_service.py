from typing import Any, Dict

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from serptrack.config import settings
from serptrack.models import AppSettings
from serptrack.core.logging import get_logger

logger = get_logger(__name__)

SETTING_FIELDS = (
    "scraper_type",
    "scraping_api",
    "search_console_client_email",
    "search_console_private_key",
    "adwords_client_id",
    "adwords_client_secret",
    "adwords_refresh_token",
    "adwords_developer_token",
    "adwords_account_id",
)


class AppSettingsData(BaseModel):
    """
    单次请求使用的应用设置快照
    由调用方显式传给抓取、搜索量等服务
    """
    scraper_type: str = ""
    scraping_api: str = ""
    search_console_client_email: str = ""
    search_console_private_key: str = ""
    adwords_client_id: str = ""
    adwords_client_secret: str = ""
    adwords_refresh_token: str = ""
    adwords_developer_token: str = ""
    adwords_account_id: str = ""

    @property
    def search_console_configured(self) -> bool:
        return bool(self.search_console_client_email and self.search_console_private_key)

    @property
    def adwords_configured(self) -> bool:
        return bool(
            self.adwords_account_id
            and self.adwords_client_id
            and self.adwords_client_secret
            and self.adwords_developer_token
        )


async def get_settings_record(db: AsyncSession) -> AppSettings:
    result = await db.execute(select(AppSettings).where(AppSettings.id == 1))
    record = result.scalar_one_or_none()

    if not record:
        record = AppSettings(id=1)
        db.add(record)
        await db.commit()
        await db.refresh(record)

    return record


async def get_app_settings(db: AsyncSession) -> AppSettingsData:
    """
    读取应用设置
    数据库中为空的字段回退到环境变量配置
    """
    record = await get_settings_record(db)
    values = {field: getattr(record, field) or "" for field in SETTING_FIELDS}

    values["scraper_type"] = values["scraper_type"] or settings.SCRAPER_TYPE
    values["scraping_api"] = values["scraping_api"] or settings.SCRAPING_API
    values["search_console_client_email"] = (
        values["search_console_client_email"] or settings.SEARCH_CONSOLE_CLIENT_EMAIL
    )
    values["search_console_private_key"] = (
        values["search_console_private_key"] or settings.SEARCH_CONSOLE_PRIVATE_KEY
    )

    return AppSettingsData(**values)


async def save_app_settings(db: AsyncSession, values: Dict[str, Any]) -> AppSettingsData:
    """
    保存应用设置，未知字段忽略，None 表示不修改
    """
    record = await get_settings_record(db)

    changed = []
    for field in SETTING_FIELDS:
        if field in values and values[field] is not None:
            setattr(record, field, str(values[field]).strip())
            changed.append(field)

    await db.commit()
    logger.info(f"应用设置已保存: {', '.join(changed) or '无变更'}")

    return await get_app_settings(db)
