"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出（异常栈转成结构化字段）
每条日志带上 store 字段（后端存储 key 前缀），多个看板数据集共用日志时可区分。
"""

import logging

import structlog

# 这些库在 DEBUG 级别逐条记录 SQL 执行
_CHATTY_LOGGERS = ("aiosqlite",)


def setup_logging(
    log_format: str = "dev",
    log_level: str = "INFO",
    key_prefix: str | None = None,
) -> None:
    """初始化 structlog 配置

    Args:
        log_format: "json" 为结构化 JSON 输出，其余值使用 pretty print
        log_level: 标准库日志级别名，无法识别时使用 INFO
        key_prefix: 后端存储 key 前缀，绑定为日志上下文 store 字段
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer_chain: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        renderer_chain = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderer_chain,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    if key_prefix:
        structlog.contextvars.bind_contextvars(store=key_prefix)
