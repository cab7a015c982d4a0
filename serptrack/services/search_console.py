"""
Search Console 数据整合
读取本地缓存的 Search Console 数据，并按关键词合并到接口返回中
"""
import json
import os
from typing import Any, Dict, List, Optional

from serptrack.config import settings
from serptrack.core.logging import get_logger

logger = get_logger(__name__)

SC_PERIODS = ("threeDays", "sevenDays", "thirtyDays")


def sc_data_path(domain: str) -> str:
    file_name = f"SC_{domain.replace('.', '_').replace('/', '_')}.json"
    return os.path.join(settings.DATA_DIR, file_name)


def read_local_sc_data(domain: str) -> Optional[Dict[str, List[Dict[str, Any]]]]:
    """
    读取域名的本地 Search Console 数据

    Returns:
        按时间段分组的数据，文件不存在或无法解析时返回 None
    """
    path = sc_data_path(domain)
    if not os.path.exists(path):
        return None

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as e:
        logger.warning(f"读取 Search Console 数据失败 {domain}: {str(e)}")
        return None

    if not isinstance(data, dict):
        return None
    return data


def keyword_uid(keyword: Dict[str, Any]) -> str:
    return f"{keyword['country'].lower()}:{keyword['device']}:{keyword['keyword'].lower()}"


def _empty_stats() -> Dict[str, Dict[str, float]]:
    return {
        metric: {period: 0 for period in SC_PERIODS}
        for metric in ("impressions", "visits", "ctr", "position")
    }


def integrate_keyword_sc_data(keyword: Dict[str, Any], sc_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    将 Search Console 数据合并到关键词字典，结果写入 scData

    impressions / visits 按时间段求和，ctr / position 取平均值
    """
    uid = keyword_uid(keyword)
    stats = _empty_stats()

    for period in SC_PERIODS:
        items = [item for item in sc_data.get(period) or [] if item.get("uid") == uid]
        if not items:
            continue
        stats["impressions"][period] = sum(item.get("impressions", 0) for item in items)
        stats["visits"][period] = sum(item.get("clicks", 0) for item in items)
        stats["ctr"][period] = round(sum(item.get("ctr", 0) for item in items) / len(items), 2)
        stats["position"][period] = round(sum(item.get("position", 0) for item in items) / len(items))

    return {**keyword, "scData": stats}
