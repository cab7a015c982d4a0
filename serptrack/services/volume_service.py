"""
关键词搜索量服务
通过 Google Ads 关键词规划接口获取月搜索量
"""
from typing import Dict, List, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from serptrack.config import settings
from serptrack.core.logging import get_logger
from serptrack.services.keyword_repository import KeywordRepository
from serptrack.services.settings_service import AppSettingsData

logger = get_logger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_ADS_API = "https://googleads.googleapis.com/v18"


class VolumeProviderError(Exception):
    """搜索量接口异常"""
    pass


RETRYABLE_EXCEPTIONS = (
    httpx.TimeoutException,
    httpx.ConnectError,
)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
    before_sleep=before_sleep_log(logger, log_level=20),
    reraise=True,
)
async def get_access_token(client: httpx.AsyncClient, app_settings: AppSettingsData) -> str:
    response = await client.post(GOOGLE_TOKEN_URL, data={
        "client_id": app_settings.adwords_client_id,
        "client_secret": app_settings.adwords_client_secret,
        "refresh_token": app_settings.adwords_refresh_token,
        "grant_type": "refresh_token",
    })
    if response.status_code != 200:
        raise VolumeProviderError(f"获取 Google Ads 访问令牌失败: HTTP {response.status_code}")
    token = response.json().get("access_token")
    if not token:
        raise VolumeProviderError("Google Ads 未返回访问令牌")
    return token


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
    before_sleep=before_sleep_log(logger, log_level=20),
    reraise=True,
)
async def fetch_historical_metrics(
    client: httpx.AsyncClient,
    app_settings: AppSettingsData,
    access_token: str,
    keywords: List[str],
) -> List[Dict]:
    account_id = app_settings.adwords_account_id.replace("-", "")
    url = f"{GOOGLE_ADS_API}/customers/{account_id}:generateKeywordHistoricalMetrics"
    headers = {
        "Authorization": f"Bearer {access_token}",
        "developer-token": app_settings.adwords_developer_token,
        "login-customer-id": account_id,
    }
    response = await client.post(url, headers=headers, json={
        "keywords": keywords,
        "keywordPlanNetwork": "GOOGLE_SEARCH",
    })
    if response.status_code != 200:
        raise VolumeProviderError(f"Google Ads 搜索量请求失败: HTTP {response.status_code}")
    return response.json().get("results", [])


def map_volumes(keywords: List[Dict], results: List[Dict]) -> Dict[int, int]:
    """按关键词文本（不区分大小写）把搜索量映射到关键词 ID"""
    volume_by_text = {}
    for item in results:
        text = (item.get("text") or "").lower()
        metrics = item.get("keywordMetrics") or {}
        volume_by_text[text] = int(metrics.get("avgMonthlySearches") or 0)

    return {
        keyword["id"]: volume_by_text.get(keyword["keyword"].lower(), 0)
        for keyword in keywords
    }


async def get_keywords_volume(
    keywords: List[Dict],
    app_settings: AppSettingsData,
) -> Optional[Dict[int, int]]:
    """
    获取关键词搜索量

    Args:
        keywords: 已解析的关键词字典列表
        app_settings: 当前应用设置

    Returns:
        {关键词 ID: 月搜索量}，未配置或请求失败时返回 None
    """
    if not keywords or not app_settings.adwords_configured:
        return None

    texts = list(dict.fromkeys(keyword["keyword"] for keyword in keywords))
    try:
        async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            access_token = await get_access_token(client, app_settings)
            results = await fetch_historical_metrics(client, app_settings, access_token, texts)
    except (VolumeProviderError, httpx.HTTPError) as e:
        logger.error(f"获取关键词搜索量失败: {str(e)}")
        return None

    return map_volumes(keywords, results)


async def update_keywords_volume_data(db: AsyncSession, volumes: Dict[int, int]) -> int:
    updated = await KeywordRepository(db).update_volumes(volumes)
    logger.info(f"已更新 {updated} 个关键词的搜索量")
    return updated
