from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from serptrack.models import get_db, Keyword
from serptrack.services import scheduler
from serptrack.services.auth import require_user

router = APIRouter(prefix="/api", tags=["系统管理"])


@router.get("/health")
async def health_check():
    """
    健康检查接口

    Returns:
        服务状态
    """
    return {
        "status": "healthy",
        "service": "SerpTrack",
        "version": "1.0.0"
    }


@router.get("/status", dependencies=[Depends(require_user)])
async def get_status(db: AsyncSession = Depends(get_db)):
    """
    获取系统状态

    Returns:
        关键词统计与调度器状态
    """
    total_result = await db.execute(select(func.count(Keyword.id)))
    total_keywords = total_result.scalar() or 0

    domains_result = await db.execute(select(func.count(func.distinct(Keyword.domain))))
    total_domains = domains_result.scalar() or 0

    updating_result = await db.execute(
        select(func.count(Keyword.id)).where(Keyword.updating == True)
    )
    updating_keywords = updating_result.scalar() or 0

    return {
        "database": {
            "total_keywords": total_keywords,
            "total_domains": total_domains,
            "updating_keywords": updating_keywords
        },
        "scheduler": scheduler.get_status()
    }


@router.post("/refresh", dependencies=[Depends(require_user)])
async def trigger_refresh():
    """
    手动触发全部关键词的排名刷新（加入刷新队列后立即返回）
    """
    return await scheduler.refresh_all_keywords_task()
