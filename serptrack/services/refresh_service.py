"""
关键词排名刷新
新增关键词后通过 RefreshQueue 异步交给后台任务处理，接口不等待刷新完成
"""
import asyncio
import json
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

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
from serptrack.models import AsyncSessionLocal, Keyword
from serptrack.scrapers import (
    ScraperSettings,
    ScraperError,
    ScraperNetworkError,
    ScraperResponseError,
    get_scraper,
)
from serptrack.scrapers.serp_parser import extract_organic_results, find_domain_position
from serptrack.services.keyword_repository import KeywordRepository
from serptrack.services.keyword_service import history_key, keyword_to_dict
from serptrack.services.settings_service import AppSettingsData, get_app_settings

logger = get_logger(__name__)

RETRYABLE_EXCEPTIONS = (
    ScraperNetworkError,
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
async def scrape_keyword(
    keyword: Dict,
    scraper: ScraperSettings,
    app_settings: AppSettingsData,
) -> List[Dict]:
    """
    抓取单个关键词的搜索结果

    重试策略：
    - 最多 3 次，指数退避
    - 仅对网络错误和超时重试，HTTP 错误和解析错误不重试
    """
    url = scraper.scrape_url(keyword, app_settings)

    try:
        async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
    except httpx.TimeoutException:
        logger.warning(f"抓取超时: {keyword['keyword']}，将重试...")
        raise ScraperNetworkError(f"请求超时: {scraper.name}")
    except httpx.ConnectError as e:
        logger.warning(f"抓取连接失败: {keyword['keyword']}，将重试...")
        raise ScraperNetworkError(f"连接失败: {scraper.name}, 错误: {str(e)}")
    except httpx.HTTPStatusError as e:
        raise ScraperResponseError(f"HTTP 错误: {e.response.status_code} {scraper.name}")
    except httpx.TransportError as e:
        logger.warning(f"抓取网络错误: {keyword['keyword']}，将重试...")
        raise ScraperNetworkError(f"网络错误: {scraper.name}, 错误: {type(e).__name__} {str(e)}")
    except httpx.HTTPError as e:
        raise ScraperResponseError(f"请求失败: {scraper.name}, 错误: {str(e)}")

    try:
        body = response.json()
    except ValueError:
        raise ScraperResponseError(f"{scraper.name} 返回的不是 JSON")

    page = body.get(scraper.result_object_key) if isinstance(body, dict) else None
    if not isinstance(page, str):
        raise ScraperResponseError(f"{scraper.name} 响应缺少 {scraper.result_object_key} 字段")

    return extract_organic_results(page)


def apply_refresh_result(keyword: Keyword, results: List[Dict], now: datetime) -> None:
    """把抓取结果写回关键词（排名、历史、排名页面、上次结果）"""
    match = find_domain_position(results, keyword.domain)
    history = json.loads(keyword.history or "{}")
    history[history_key(now)] = match["position"]

    keyword.position = match["position"]
    keyword.url = match["url"]
    keyword.history = json.dumps(history)
    keyword.last_result = json.dumps(results)
    keyword.last_update_error = None
    keyword.updating = False
    keyword.last_updated = now


def record_refresh_error(keyword: Keyword, message: str, scraper_id: str) -> None:
    keyword.updating = False
    keyword.last_update_error = json.dumps({
        "date": datetime.now(timezone.utc).isoformat(),
        "error": message,
        "scraper": scraper_id,
    })


async def refresh_and_update_keywords(
    db: AsyncSession,
    keywords: Iterable[Keyword],
    app_settings: AppSettingsData,
) -> Dict[int, bool]:
    """
    刷新关键词排名

    Returns:
        {关键词 ID: 是否刷新成功}
    """
    scraper = get_scraper(app_settings.scraper_type)
    results: Dict[int, bool] = {}
    keywords = list(keywords)

    if not scraper:
        logger.warning(f"未配置可用的抓取服务 ({app_settings.scraper_type or '空'})，跳过刷新")
        for keyword in keywords:
            keyword.updating = False
        await db.commit()
        return {keyword.id: False for keyword in keywords}

    for keyword in keywords:
        try:
            organic = await scrape_keyword(keyword_to_dict(keyword), scraper, app_settings)
            apply_refresh_result(keyword, organic, datetime.now(timezone.utc))
            results[keyword.id] = True
            logger.info(f"关键词刷新完成: {keyword.keyword} ({keyword.domain}) -> {keyword.position}")
        except ScraperError as e:
            record_refresh_error(keyword, str(e), scraper.id)
            results[keyword.id] = False
            logger.error(f"关键词刷新失败: {keyword.keyword} ({keyword.domain}): {str(e)}")
        except Exception as e:
            record_refresh_error(keyword, f"{type(e).__name__}: {str(e)}", scraper.id)
            results[keyword.id] = False
            logger.exception(f"关键词刷新异常: {keyword.keyword} ({keyword.domain})")
        await db.commit()

    return results


class RefreshQueue:
    """
    刷新任务队列
    enqueue() 只负责放入关键词 ID，由后台 worker 逐批刷新
    """

    def __init__(self):
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    @property
    def queue(self) -> asyncio.Queue:
        if self._queue is None:
            self._queue = asyncio.Queue()
        return self._queue

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def qsize(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def enqueue(self, keyword_ids: Iterable[int]) -> None:
        ids = [keyword_id for keyword_id in keyword_ids if keyword_id is not None]
        if not ids:
            return
        self.queue.put_nowait(ids)
        logger.debug(f"已加入刷新队列: {ids}")

    def start(self) -> None:
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._run(), name="keyword-refresh-worker")
        logger.info("关键词刷新队列已启动")

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("关键词刷新队列已停止")

    async def _run(self) -> None:
        while True:
            ids = await self.queue.get()
            try:
                await self.process(ids)
            except Exception as e:
                logger.error(f"刷新任务异常 {ids}: {str(e)}")
            finally:
                self.queue.task_done()

    async def process(self, ids: List[int]) -> Dict[int, bool]:
        async with AsyncSessionLocal() as db:
            app_settings = await get_app_settings(db)
            keywords = await KeywordRepository(db).find_by_ids(ids)
            return await refresh_and_update_keywords(db, keywords, app_settings)


refresh_queue = RefreshQueue()
