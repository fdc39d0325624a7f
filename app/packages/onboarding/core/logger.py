"""日志配置模块：终端彩色输出、按天滚动的文件日志，以及请求 ID 注入。"""

import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class TimezoneFormatter(logging.Formatter):
    """按 Settings.timezone 渲染时间戳，未指定 datefmt 时输出带毫秒的 ISO 格式。"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: D401
        dt = datetime.fromtimestamp(record.created, get_settings().timezone_info)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(TimezoneFormatter):
    """终端为 TTY 时按级别着色，重定向到文件或管道时输出纯文本。"""

    RESET = "\033[0m"
    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def __init__(self, fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_colors = sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{message}{self.RESET}" if color else message


_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """把当前请求的 request_id 写入每条 LogRecord。"""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = _request_id_ctx.get()
        return True


def build_logging_config(level: Optional[str] = None) -> dict:
    """生成 dictConfig 配置；``level`` 覆盖配置中的 ``LOG_LEVEL``。"""
    settings = get_settings()
    log_level = (level or settings.log_level).upper()
    handlers = ["default", "file"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"()": ColorFormatter, "fmt": LOG_FORMAT},
            "plain": {"()": TimezoneFormatter, "fmt": LOG_FORMAT},
        },
        "filters": {"request_id": {"()": RequestIdFilter}},
        "handlers": {
            "default": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "console",
                "filters": ["request_id"],
            },
            "file": {
                "level": log_level,
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": "plain",
                "filename": str(settings.log_file_path),
                "when": "midnight",
                "backupCount": 14,
                "encoding": "utf-8",
                "delay": True,
                "filters": ["request_id"],
            },
        },
        "loggers": {
            "uvicorn": {"handlers": handlers, "level": log_level, "propagate": False},
            "uvicorn.access": {"handlers": handlers, "level": log_level, "propagate": False},
            "app": {"handlers": handlers, "level": log_level, "propagate": False},
        },
        "root": {"handlers": handlers, "level": log_level},
    }


def setup_logging(level: Optional[str] = None) -> None:
    """初始化日志系统，服务与运维脚本共用；脚本的 ``--verbose`` 通过 ``level`` 输出逐条探测日志。"""
    get_settings().log_directory.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(level))


logger = logging.getLogger("app")


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)


def get_logger(name: str) -> logging.Logger:
    """返回挂在 ``app`` 之下的子 logger，复用同一套 handler，如 ``app.reconciliation``。"""
    if name == "app" or name.startswith("app."):
        return logging.getLogger(name)
    return logger.getChild(name)
