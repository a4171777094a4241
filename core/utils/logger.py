"""日志系统模块 - 结构化格式、日志轮换、敏感信息脱敏"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from pythonjsonlogger import jsonlogger

# 日志中永远不能出现完整值的字段
SENSITIVE_FIELDS = {"sign", "api_key", "apikey", "apiKey", "key_value", "secret"}

DEFAULT_LOG_CONFIG: dict[str, Any] = {
    "level": "INFO",
    "format": "json",  # 默认使用JSON格式便于解析
    "max_file_size": 50 * 1024 * 1024,  # 50MB
    "backup_count": 5,
}

_configured = False


def mask_secret(value: Any, visible: int = 4) -> str:
    """只保留前几位，其余用 **** 替代"""
    if value is None or value == "":
        return "Not set"
    text = str(value)
    return text[:visible] + "****"


def mask_payload(payload: Optional[dict[str, Any]]) -> dict[str, Any]:
    """
    返回脱敏后的payload副本，用于日志输出

    Args:
        payload: 原始请求/响应字典

    Returns:
        敏感字段被遮盖的新字典
    """
    if not payload:
        return {}
    return {
        key: mask_secret(value) if key in SENSITIVE_FIELDS else value
        for key, value in payload.items()
    }


def setup_logging(
    config: Optional[dict[str, Any]] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    设置全局日志系统

    Args:
        config: 日志配置字典 (level, format, max_file_size, backup_count)
        log_file: 日志文件路径，None 表示只输出到stdout
    """
    global _configured

    config = {**DEFAULT_LOG_CONFIG, **(config or {})}
    log_level = str(config.get("level", "INFO")).upper()
    log_format = config.get("format", "json")  # text or json

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    # 添加文件处理器（轮换日志）
    if log_file:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=config["max_file_size"],
                backupCount=config["backup_count"],
                encoding="utf-8",
            )
            if log_format == "json":
                file_handler.setFormatter(
                    jsonlogger.JsonFormatter(
                        "%(asctime)s %(name)s %(levelname)s %(message)s"
                    )
                )
            else:
                file_handler.setFormatter(
                    logging.Formatter(
                        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
                    )
                )
            handlers.append(file_handler)
        except OSError as e:
            print(f"Failed to setup file logging: {e}", file=sys.stderr)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # 配置根日志记录器
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(message)s",
        handlers=handlers,
        force=True,  # 覆盖现有配置
    )

    # 禁用第三方库的噪音日志
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    _configured = True


def is_logging_configured() -> bool:
    return _configured


def get_logger(name: Optional[str] = None):
    """
    获取日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        structlog 绑定日志记录器
    """
    return structlog.get_logger(name or __name__)


def bind_request_context(**context: Any) -> None:
    """绑定请求级上下文（如 request_id），对当前协程内的所有日志生效"""
    structlog.contextvars.bind_contextvars(**context)


def clear_request_context() -> None:
    """清除请求级上下文"""
    structlog.contextvars.clear_contextvars()


def shutdown_logging() -> None:
    """刷新并关闭所有日志处理器"""
    global _configured
    logging.shutdown()
    _configured = False
