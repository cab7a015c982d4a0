import json
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from serptrack.models import Keyword


def parse_id(token: str) -> Optional[int]:
    """解析单个关键词 ID，非数字返回 None（不匹配任何记录）"""
    token = token.strip()
    digits = token[1:] if token[:1] in ("+", "-") else token
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(token)


def parse_ids(raw: str) -> List[Optional[int]]:
    """
    解析逗号分隔的关键词 ID 列表

    Example:
        >>> parse_ids("3,4,x")
        [3, 4, None]
    """
    return [parse_id(item) for item in raw.split(",")]


def _valid_ids(ids: Iterable[Optional[int]]) -> List[int]:
    return [keyword_id for keyword_id in ids if keyword_id is not None]


class KeywordRepository:
    """
    关键词数据访问
    所有写操作在方法内提交
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def bulk_create(self, items: List[Dict[str, Any]]) -> List[Keyword]:
        keywords = [Keyword(**item) for item in items]
        self.db.add_all(keywords)
        await self.db.commit()
        for keyword in keywords:
            await self.db.refresh(keyword)
        return keywords

    async def find_all(self) -> List[Keyword]:
        result = await self.db.execute(select(Keyword).order_by(Keyword.id))
        return list(result.scalars().all())

    async def find_by_domain(self, domain: str) -> List[Keyword]:
        result = await self.db.execute(
            select(Keyword).where(Keyword.domain == domain).order_by(Keyword.id)
        )
        return list(result.scalars().all())

    async def find_by_ids(self, ids: Iterable[Optional[int]]) -> List[Keyword]:
        query = (
            select(Keyword)
            .where(Keyword.id.in_(_valid_ids(ids)))
            .order_by(Keyword.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(self, keyword_id: Optional[int]) -> Optional[Keyword]:
        if keyword_id is None:
            return None
        result = await self.db.execute(
            select(Keyword)
            .where(Keyword.id == keyword_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update_by_ids(self, ids: Iterable[Optional[int]], values: Dict[str, Any]) -> int:
        values = dict(values)
        if "tags" in values and not isinstance(values["tags"], str):
            values["tags"] = json.dumps(values["tags"])
        result = await self.db.execute(
            update(Keyword)
            .where(Keyword.id.in_(_valid_ids(ids)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount

    async def set_tags(self, keyword: Keyword, tags: List[str]) -> None:
        keyword.tags = json.dumps(tags)
        await self.db.commit()

    async def update_volumes(self, volumes: Dict[int, int]) -> int:
        updated = 0
        for keyword_id, volume in volumes.items():
            result = await self.db.execute(
                update(Keyword)
                .where(Keyword.id == keyword_id)
                .values(volume=volume)
                .execution_options(synchronize_session=False)
            )
            updated += result.rowcount
        await self.db.commit()
        return updated

    async def delete_by_ids(self, ids: Iterable[Optional[int]]) -> int:
        result = await self.db.execute(
            delete(Keyword)
            .where(Keyword.id.in_(_valid_ids(ids)))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount
