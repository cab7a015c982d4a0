from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from datetime import datetime

from serptrack.config import settings
from serptrack.core.logging import get_logger
from serptrack.models import AsyncSessionLocal
from serptrack.services.keyword_repository import KeywordRepository
from serptrack.services.refresh_service import refresh_queue

logger = get_logger(__name__)


class TaskScheduler:

    def __init__(self):
        self.scheduler = AsyncIOScheduler()
        self._is_running = False

    def start(self):
        if self._is_running:
            logger.warning("调度器已在运行中")
            return

        self.scheduler.add_job(
            self.refresh_all_keywords_task,
            trigger=CronTrigger(hour=settings.REFRESH_CRON_HOUR, minute=0),
            id='refresh_keywords',
            name='Keyword Position Refresher',
            replace_existing=True,
            max_instances=1
        )

        self.scheduler.start()
        self._is_running = True

        logger.info(f"定时任务调度器已启动，每天 {settings.REFRESH_CRON_HOUR}:00 刷新排名")

    async def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self._is_running = False
        logger.info("定时任务调度器已停止")

    async def refresh_all_keywords_task(self):
        """把所有关键词标记为刷新中并加入刷新队列"""
        logger.info(f"[{datetime.now()}] 开始执行关键词排名刷新任务")

        async with AsyncSessionLocal() as db:
            try:
                repository = KeywordRepository(db)
                keywords = await repository.find_all()
                ids = [keyword.id for keyword in keywords]
                if not ids:
                    logger.info("没有需要刷新的关键词")
                    return {"status": "success", "queued": 0}

                await repository.update_by_ids(ids, {"updating": True})
                refresh_queue.enqueue(ids)
                logger.info(f"已加入刷新队列: {len(ids)} 个关键词")

                return {"status": "success", "queued": len(ids)}

            except Exception as e:
                logger.error(f"关键词刷新任务异常: {str(e)}")
                return {"status": "error", "message": str(e)}

    def get_status(self) -> dict:
        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if getattr(job, "next_run_time", None) else None,
                "trigger": str(job.trigger)
            })

        return {
            "running": self._is_running,
            "jobs": jobs,
            "refresh_queue": {
                "running": refresh_queue.is_running,
                "pending": refresh_queue.qsize()
            }
        }


scheduler = TaskScheduler()


def get_scheduler() -> TaskScheduler:
    return scheduler
