"""
Google 搜索结果页解析
"""
from typing import Dict, List, Optional
from urllib.parse import parse_qs, unquote, urlparse

from bs4 import BeautifulSoup


def _resolve_link(href: Optional[str]) -> Optional[str]:
    if not href:
        return None
    # 无 JS 版本的结果页使用 /url?q= 跳转链接
    if href.startswith("/url?"):
        params = parse_qs(urlparse(href).query)
        href = unquote((params.get("q") or params.get("url") or [""])[0])
    if not href.startswith(("http://", "https://")):
        return None
    host = urlparse(href).netloc.lower()
    if not host or host.endswith("google.com") or ".google." in host:
        return None
    return href


def extract_organic_results(page: str) -> List[Dict]:
    """
    提取自然搜索结果

    只保留包含 <h3> 标题的外部链接，按出现顺序编号，重复链接只计一次
    """
    if not page:
        return []

    soup = BeautifulSoup(page, "html.parser")
    results = []
    seen = set()

    for anchor in soup.select("a[href]"):
        title_elem = anchor.select_one("h3")
        if title_elem is None:
            continue
        link = _resolve_link(anchor.get("href"))
        if not link or link in seen:
            continue
        seen.add(link)
        title = title_elem.get_text(" ", strip=True)
        results.append({"title": " ".join(title.split()), "url": link, "position": len(results) + 1})

    return results


def normalize_host(url_or_domain: str) -> str:
    value = url_or_domain.strip().lower()
    if "://" not in value:
        value = f"http://{value}"
    host = urlparse(value).netloc
    return host[4:] if host.startswith("www.") else host


def find_domain_position(results: List[Dict], domain: str) -> Dict:
    """
    查找域名在结果中的排名

    Returns:
        {"position": 排名, "url": 页面地址}，未找到时排名为 0
    """
    target = normalize_host(domain)
    for item in results:
        host = normalize_host(item["url"])
        if host == target or host.endswith(f".{target}"):
            return {"position": item["position"], "url": item["url"]}
    return {"position": 0, "url": ""}
