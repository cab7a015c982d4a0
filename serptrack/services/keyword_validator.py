"""
关键词更新数据的校验与规范化
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from serptrack.utils.countries import is_valid_country

ALLOWED_DEVICES = ("desktop", "mobile")
MAX_CITY_LENGTH = 120

# 单字段编辑模式下识别的字段
EDITABLE_FIELDS = ("keyword", "url", "country", "city", "device", "tags")

MODE_STICKY = "sticky"
MODE_TAG_MERGE = "tag_merge"
MODE_FIELDS = "fields"


class KeywordValidationError(ValueError):
    """关键词更新数据不合法"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def resolve_update_mode(payload: Dict[str, Any]) -> str:
    """
    判断更新模式
    sticky 优先，其次是以关键词 ID 为键的标签合并，最后是单字段编辑
    """
    if "sticky" in payload:
        return MODE_STICKY
    if isinstance(payload.get("tags"), dict):
        return MODE_TAG_MERGE
    return MODE_FIELDS


def validate_sticky(value: Any) -> bool:
    if not isinstance(value, bool):
        raise KeywordValidationError("Sticky should be a boolean value.")
    return value


def is_valid_url(value: str) -> bool:
    if not value:
        return True
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def unique(items: List[str]) -> List[str]:
    """去重并保留首次出现的顺序"""
    return list(dict.fromkeys(items))


def normalize_tags(tags: Any) -> List[str]:
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise KeywordValidationError("Invalid tags payload.")
    return unique([tag.strip() for tag in tags if tag.strip()])


def validate_tag_merge_payload(tags_payload: Dict[str, Any]) -> Dict[str, List[str]]:
    for tags in tags_payload.values():
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise KeywordValidationError("Invalid tags payload.")
    return tags_payload


def merge_tags(current: List[str], incoming: List[str], multiple_keywords: bool) -> List[str]:
    """
    合并标签

    同一请求中包含多个关键词时取并集；只有一个关键词时直接使用请求中的标签。
    """
    if multiple_keywords:
        return unique([*current, *incoming])
    return list(incoming)


def validate_keyword_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    校验单字段编辑数据

    Args:
        payload: 请求体，可包含 keyword / url / country / city / device / tags

    Returns:
        规范化后待写入的字段，附带 last_updated 时间戳

    Raises:
        KeywordValidationError: 任一字段不合法或没有可更新的字段
    """
    values: Dict[str, Any] = {}

    if "keyword" in payload:
        keyword = payload["keyword"]
        if not isinstance(keyword, str) or not keyword.strip():
            raise KeywordValidationError("Keyword is required.")
        values["keyword"] = keyword.strip()

    if "url" in payload:
        url = payload["url"]
        if not isinstance(url, str):
            raise KeywordValidationError("URL should be a string.")
        trimmed_url = url.strip()
        if not is_valid_url(trimmed_url):
            raise KeywordValidationError("Invalid URL provided.")
        values["url"] = trimmed_url

    if "country" in payload:
        country = payload["country"]
        if not isinstance(country, str):
            raise KeywordValidationError("Invalid country provided.")
        country = country.upper()
        if not is_valid_country(country):
            raise KeywordValidationError("Invalid country provided.")
        values["country"] = country

    if "city" in payload:
        city: Optional[str] = payload["city"]
        if city is not None and not isinstance(city, str):
            raise KeywordValidationError("Invalid city provided.")
        trimmed_city = city.strip() if city else ""
        if len(trimmed_city) > MAX_CITY_LENGTH:
            raise KeywordValidationError(f"City should be {MAX_CITY_LENGTH} characters or fewer.")
        values["city"] = trimmed_city

    if "device" in payload:
        device = payload["device"]
        if not isinstance(device, str):
            raise KeywordValidationError("Invalid device provided.")
        device = device.lower()
        if device not in ALLOWED_DEVICES:
            raise KeywordValidationError("Invalid device provided.")
        values["device"] = device

    if "tags" in payload:
        values["tags"] = normalize_tags(payload["tags"])

    if not values:
        raise KeywordValidationError("No valid fields provided to update.")

    values["last_updated"] = datetime.now(timezone.utc)
    return values


def has_editable_fields(payload: Dict[str, Any]) -> bool:
    return any(field in payload for field in EDITABLE_FIELDS)


def validate_new_keyword(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    校验新增关键词

    device 默认 desktop，country 默认 US；keyword / country / device / city 与编辑时规则一致

    Raises:
        KeywordValidationError: 字段不合法或缺少域名
    """
    values = validate_keyword_fields({
        "keyword": item.get("keyword"),
        "device": item.get("device") or "desktop",
        "country": item.get("country") or "US",
        "city": item.get("city"),
    })
    values.pop("last_updated")

    domain = item.get("domain")
    if not isinstance(domain, str) or not domain.strip():
        raise KeywordValidationError("Domain is Required!")
    values["domain"] = domain.strip()
    return values
