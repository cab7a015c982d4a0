"""
统一日志配置模块
为 API、刷新队列和调度器提供集中式的日志配置
"""
import logging
import sys
from typing import Optional


# 第三方库日志默认级别
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "apscheduler": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
}


class LogFormatter(logging.Formatter):
    """
    控制台日志格式化器
    按日志级别着色
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if self.use_color and levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # 同一条记录可能还会交给其他处理器
            record.levelname = levelname


class LoggingConfig:
    """
    日志配置类
    只允许初始化一次，测试中可通过 reset() 重置
    """

    _initialized: bool = False

    @classmethod
    def setup(
        cls,
        level: str = "INFO",
        log_format: Optional[str] = None,
        date_format: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        """
        配置日志系统

        Args:
            level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_format: 自定义日志格式
            date_format: 自定义日期格式
            use_color: 控制台是否使用彩色输出
        """
        if cls._initialized:
            return

        if log_format is None:
            log_format = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
        if date_format is None:
            date_format = "%Y-%m-%d %H:%M:%S"

        numeric_level = getattr(logging, level.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(
            LogFormatter(use_color=use_color, fmt=log_format, datefmt=date_format)
        )
        root_logger.addHandler(console_handler)

        for name, logger_level in QUIET_LOGGERS.items():
            logging.getLogger(name).setLevel(logger_level)

        cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """
        重置日志配置（主要用于测试）
        """
        cls._initialized = False
        logging.getLogger().handlers.clear()


def setup_logging(debug: bool = False) -> None:
    """
    便捷函数：按调试开关设置日志级别
    """
    level = "DEBUG" if debug else "INFO"
    LoggingConfig.setup(level=level)


def get_logger(name: str) -> logging.Logger:
    """
    获取指定名称的日志器

    Example:
        >>> from serptrack.core.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("关键词刷新完成")
    """
    return logging.getLogger(name)
