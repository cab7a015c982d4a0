from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from serptrack.core.errors import APIError
from serptrack.core.logging import get_logger
from serptrack.models import get_db
from serptrack.scrapers import SCRAPERS
from serptrack.services.auth import json_body, require_user
from serptrack.services.settings_service import get_app_settings, save_app_settings

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/settings",
    tags=["应用设置"],
    dependencies=[Depends(require_user)],
)


def serialize_settings(app_settings) -> dict:
    data = app_settings.model_dump()
    data["available_scrapers"] = [
        {"id": scraper.id, "name": scraper.name, "website": scraper.website, "allows_city": scraper.allows_city}
        for scraper in SCRAPERS.values()
    ]
    return data


@router.get("")
async def get_settings(db: AsyncSession = Depends(get_db)):
    try:
        app_settings = await get_app_settings(db)
    except Exception as e:
        logger.error(f"读取应用设置失败: {str(e)}")
        raise APIError(400, "Error Loading Settings.")

    return {"settings": serialize_settings(app_settings)}


@router.put("")
async def update_settings(
    payload: Optional[Dict[str, Any]] = Depends(json_body),
    db: AsyncSession = Depends(get_db)
):
    values = (payload or {}).get("settings")
    if not isinstance(values, dict):
        raise APIError(400, "Settings Data Missing!")

    scraper_type = values.get("scraper_type")
    if scraper_type and scraper_type not in SCRAPERS:
        raise APIError(400, "Invalid scraper type.")

    try:
        app_settings = await save_app_settings(db, values)
    except Exception as e:
        await db.rollback()
        logger.error(f"保存应用设置失败: {str(e)}")
        raise APIError(400, "Error Updating Settings.")

    return {"settings": serialize_settings(app_settings)}
