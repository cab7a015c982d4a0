import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from serptrack.core.logging import get_logger
from serptrack.models import Keyword
from serptrack.services import keyword_validator
from serptrack.services.keyword_repository import KeywordRepository, parse_id
from serptrack.services.keyword_validator import KeywordValidationError
from serptrack.services.search_console import integrate_keyword_sc_data

logger = get_logger(__name__)

HISTORY_DAYS_IN_LIST = 7


def _load_json(value: Optional[str], default):
    if not value:
        return default
    try:
        return json.loads(value)
    except ValueError:
        return default


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def keyword_to_dict(keyword: Keyword) -> Dict[str, Any]:
    """序列化关键词，解析 JSON 文本字段"""
    tags = _load_json(keyword.tags, [])
    return {
        "id": keyword.id,
        "keyword": keyword.keyword,
        "device": keyword.device,
        "country": keyword.country,
        "city": keyword.city or "",
        "domain": keyword.domain,
        "url": keyword.url or "",
        "tags": tags if isinstance(tags, list) else [],
        "sticky": bool(keyword.sticky),
        "position": keyword.position or 0,
        "history": _load_json(keyword.history, {}),
        "volume": keyword.volume or 0,
        "lastResult": _load_json(keyword.last_result, []),
        "updating": bool(keyword.updating),
        "lastUpdateError": keyword.last_update_error,
        "lastUpdated": _format_datetime(keyword.last_updated),
        "added": _format_datetime(keyword.added),
    }


def parse_history_date(date_key: str) -> datetime:
    try:
        return datetime.strptime(date_key, "%Y-%m-%d")
    except ValueError:
        return datetime.min


def slim_history(history: Dict[str, int], days: int = HISTORY_DAYS_IN_LIST) -> Dict[str, int]:
    """只保留最近几天的排名历史"""
    recent = sorted(history.items(), key=lambda item: parse_history_date(item[0]))[-days:]
    return dict(recent)


def history_key(dt: datetime) -> str:
    return f"{dt.year}-{dt.month}-{dt.day}"


def parse_tags_input(tags: Any) -> List[str]:
    """新增关键词时的标签：逗号分隔字符串或字符串列表"""
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    if not isinstance(tags, list):
        return []
    return keyword_validator.unique([str(tag).strip() for tag in tags if str(tag).strip()])


def build_new_keyword(item: Dict[str, Any]) -> Dict[str, Any]:
    """校验并构造新增关键词的字段"""
    values = keyword_validator.validate_new_keyword(item)
    now = datetime.now(timezone.utc)
    return {
        **values,
        "position": 0,
        "updating": True,
        "history": json.dumps({}),
        "url": "",
        "tags": json.dumps(parse_tags_input(item.get("tags"))),
        "sticky": False,
        "last_updated": now,
        "added": now,
    }


async def list_domain_keywords(
    db: AsyncSession,
    domain: str,
    sc_data: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    获取域名下的关键词
    列表中只返回最近 7 天的历史，不返回上次抓取结果
    """
    keywords = await KeywordRepository(db).find_by_domain(domain)

    processed = []
    for keyword in keywords:
        data = keyword_to_dict(keyword)
        data["history"] = slim_history(data["history"])
        data["lastResult"] = []
        if sc_data:
            data = integrate_keyword_sc_data(data, sc_data)
        processed.append(data)
    return processed


async def add_keywords(db: AsyncSession, items: List[Dict[str, Any]]) -> List[Keyword]:
    new_keywords = [build_new_keyword(item) for item in items]
    created = await KeywordRepository(db).bulk_create(new_keywords)
    logger.info(f"新增 {len(created)} 个关键词")
    return created


async def delete_keywords(db: AsyncSession, ids: List[Optional[int]]) -> int:
    removed = await KeywordRepository(db).delete_by_ids(ids)
    logger.info(f"删除关键词 {ids}: {removed} 条")
    return removed


async def update_sticky(db: AsyncSession, ids: List[Optional[int]], sticky: Any) -> List[Dict[str, Any]]:
    value = keyword_validator.validate_sticky(sticky)
    repository = KeywordRepository(db)
    await repository.update_by_ids(ids, {"sticky": value})
    keywords = await repository.find_by_ids(ids)
    return [keyword_to_dict(keyword) for keyword in keywords]


async def merge_keyword_tags(db: AsyncSession, tags_payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    按关键词 ID 合并标签

    逐个关键词读取后写入，没有行锁，多个请求并发修改同一关键词时以最后一次写入为准
    """
    tags_payload = keyword_validator.validate_tag_merge_payload(tags_payload)
    repository = KeywordRepository(db)
    multiple_keywords = len(tags_payload) > 1

    updated = []
    for raw_id, tags in tags_payload.items():
        keyword = await repository.get(parse_id(str(raw_id)))
        if not keyword:
            continue
        current_tags = _load_json(keyword.tags, [])
        await repository.set_tags(
            keyword,
            keyword_validator.merge_tags(current_tags, tags, multiple_keywords),
        )
        updated.append(keyword_to_dict(keyword))
    return updated


async def update_keyword_fields(
    db: AsyncSession,
    ids: List[Optional[int]],
    payload: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    编辑单个关键词

    Returns:
        更新后的关键词；更新后记录不存在时返回 None

    Raises:
        KeywordValidationError: ID 不唯一或字段不合法
    """
    if not keyword_validator.has_editable_fields(payload):
        raise KeywordValidationError("No valid fields provided to update.")
    if len(ids) != 1 or ids[0] is None:
        raise KeywordValidationError("A single valid keyword ID is required to update keyword data.")

    values = keyword_validator.validate_keyword_fields(payload)
    repository = KeywordRepository(db)
    await repository.update_by_ids(ids, values)

    keyword = await repository.get(ids[0])
    return keyword_to_dict(keyword) if keyword else None
