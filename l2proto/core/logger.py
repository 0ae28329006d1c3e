import datetime
import logging
from pathlib import Path
from typing import Optional, List
import structlog
from structlog.types import Processor
from structlog.stdlib import ProcessorFormatter, BoundLogger
from logging.handlers import RotatingFileHandler

from l2proto.config.settings import Settings

DEVICE_LOGGER_NAME = "device.l2"


def setup_logging(settings: Settings):
    """配置 structlog 和标准库 logging，开发环境输出到控制台，其他环境输出到文件。"""
    # structlog 处理器链
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_custom_timestamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers = []
    device_logger = logging.getLogger(DEVICE_LOGGER_NAME)

    if settings.ENV == "dev":
        # 开发环境：所有日志（含解码结果）输出到控制台
        console_handler = logging.StreamHandler()
        console_formatter = ProcessorFormatter(
            processor=_get_console_renderer(),
            foreign_pre_chain=processors[:-1],
        )
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)
        device_logger.handlers = []
        device_logger.propagate = True
    else:
        log_dir = Path(settings.LOG_FILE_PATH).parent if settings.LOG_FILE_PATH else Path("logs")
        log_dir.mkdir(parents=True, exist_ok=True)

        # 应用主日志
        app_handler = RotatingFileHandler(
            filename=log_dir / "app.log",
            maxBytes=settings.LOG_MAX_SIZE,
            backupCount=settings.LOG_BACKUP_COUNT,
        )
        app_handler.setFormatter(_get_json_formatter(processors))
        handlers.append(app_handler)

        # 雷达数据包日志单独输出
        packet_handler = RotatingFileHandler(
            filename=log_dir / "l2.log",
            maxBytes=settings.LOG_MAX_SIZE,
            backupCount=settings.LOG_BACKUP_COUNT,
        )
        packet_handler.setFormatter(_get_json_formatter(processors))
        device_logger.handlers = [packet_handler]
        device_logger.propagate = False  # 阻止传播到根日志器

    device_logger.setLevel(settings.LOG_LEVEL.upper())

    # 配置根日志器
    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(settings.LOG_LEVEL.upper())


def add_custom_timestamp(logger, method_name, event_dict):
    """添加自定义时间戳，精确到毫秒。"""
    now = datetime.datetime.now()
    event_dict['timestamp'] = now.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    return event_dict


def _get_json_formatter(processors: List[Processor]) -> ProcessorFormatter:
    return ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=processors[:-1],
    )


def _get_console_renderer() -> structlog.dev.ConsoleRenderer:
    """控制台渲染器"""
    return structlog.dev.ConsoleRenderer(
        pad_event=30,
        colors=True,
        exception_formatter=structlog.dev.plain_traceback
    )


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """获取 structlog 日志器。"""
    return structlog.get_logger(name or __name__)


def get_device_logger() -> BoundLogger:
    """获取雷达数据包专用的 structlog 日志器。"""
    return structlog.get_logger(DEVICE_LOGGER_NAME)
