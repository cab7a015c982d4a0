from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict

if TYPE_CHECKING:
    from serptrack.services.settings_service import AppSettingsData


class ScraperError(Exception):
    """抓取异常基类"""
    pass


class ScraperNetworkError(ScraperError):
    """网络连接或超时错误（可重试）"""
    pass


class ScraperResponseError(ScraperError):
    """抓取服务返回了无法使用的响应"""
    pass


@dataclass(frozen=True)
class ScraperSettings:
    """
    抓取服务描述

    scrape_url 根据关键词字典和应用设置生成请求地址，
    result_object_key 为响应 JSON 中 HTML 内容所在的字段
    """
    id: str
    name: str
    website: str
    allows_city: bool
    scrape_url: Callable[[Dict[str, Any], "AppSettingsData"], str]
    result_object_key: str = "result"
