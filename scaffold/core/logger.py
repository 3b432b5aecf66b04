"""日志配置模块：统一控制台/文件输出格式，并按时间滚动切分日志文件。"""

import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Optional

from .config import Settings, get_settings


class _TZFormatter(logging.Formatter):
    """按 Settings.timezone 渲染时间戳的格式化器，未指定 datefmt 时输出毫秒级 ISO-8601。"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        tz = get_settings().timezone_info
        dt = datetime.fromtimestamp(record.created, tz)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(_TZFormatter):
    """ANSI 彩色格式化器：根据不同日志级别渲染不同颜色。"""

    RESET = "\033[0m"
    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def __init__(
        self,
        fmt: str,
        datefmt: Optional[str] = None,
        style: str = "%",
        use_colors: Optional[bool] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        if use_colors is None:
            use_colors = sys.stderr.isatty()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_colors:
            return message
        color = self.COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{self.RESET}"


class JsonFormatter(_TZFormatter):
    """结构化 JSON 日志，便于接入日志采集平台。"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt=None),
            "logger": record.name,
            "level": record.levelname,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """将上下文中的 request_id 注入每一条日志记录。"""

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, "request_id", _request_id_ctx.get())
        return True


def build_logging_config(settings: Settings) -> dict:
    """根据配置生成 ``dictConfig`` 所需的字典。"""
    json_enabled = bool(settings.log_json)
    handlers = ["default", "file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"()": "scaffold.core.logger.ColorFormatter", "format": LOG_FORMAT},
            "file": {"()": "scaffold.core.logger.ColorFormatter", "format": LOG_FORMAT, "use_colors": False},
            "json": {
                "()": "scaffold.core.logger.JsonFormatter",
            },
        },
        "filters": {
            "request_id": {
                "()": "scaffold.core.logger.RequestIdFilter",
            }
        },
        "handlers": {
            "default": {
                "level": settings.log_level,
                "class": "logging.StreamHandler",
                "formatter": "json" if json_enabled else "console",
                "filters": ["request_id"],
            },
            # 日志文件按 LOG_ROTATE_WHEN 滚动，保留 LOG_BACKUP_COUNT 份
            "file": {
                "level": settings.log_level,
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": "json" if json_enabled else "file",
                "filename": str(settings.log_file_path),
                "when": settings.log_rotate_when,
                "backupCount": settings.log_backup_count,
                "encoding": "utf-8",
                "delay": True,
                "filters": ["request_id"],
            },
        },
        "loggers": {
            "uvicorn": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            "uvicorn.error": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            "uvicorn.access": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            "scaffold": {"handlers": handlers, "level": settings.log_level, "propagate": False},
        },
        "root": {
            "handlers": handlers,
            "level": settings.log_level,
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    """初始化日志系统，确保所有模块使用统一的输出格式与级别。"""
    settings = settings or get_settings()
    settings.log_directory.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings))


logger = logging.getLogger("scaffold")


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()
