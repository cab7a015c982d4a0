from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from serptrack.config import settings
from serptrack.core.errors import APIError, api_error_handler, validation_error_handler
from serptrack.models import init_db
from serptrack.routes import (
    keywords_router,
    settings_router,
    system_router
)
from serptrack.services import refresh_queue, scheduler
from serptrack.core.logging import setup_logging, get_logger

# 初始化日志系统
setup_logging(debug=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    """
    # === Startup ===
    logger.info("应用启动中...")

    await init_db()
    logger.info("数据库初始化完成")

    # 刷新队列与定时任务分开启动
    refresh_queue.start()

    if settings.SCHEDULER_ENABLED:
        scheduler.start()
    else:
        logger.info("定时任务调度器已禁用")

    logger.info("应用启动完成")

    yield  # 应用运行中

    # === Shutdown ===
    logger.info("应用关闭中...")

    await scheduler.stop()
    await refresh_queue.stop()

    logger.info("应用已关闭")


def create_app() -> FastAPI:
    """
    创建 FastAPI 应用实例

    Returns:
        配置好的 FastAPI 应用
    """
    app = FastAPI(
        title="SerpTrack API",
        description="SerpTrack 关键词排名追踪 API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # 配置 CORS - 从环境变量读取允许的域名
    allowed_origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
    )

    # 所有错误统一返回 {"error": "..."}
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(keywords_router)
    app.include_router(settings_router)
    app.include_router(system_router)
    logger.info("路由注册完成")

    return app


# 创建应用实例
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "serptrack.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
