"""配置模块 -- 可通过环境变量覆盖

包含数据库路径、后端存储 key 前缀、演示数据开关、日志配置，
以及派生视图使用的时间窗口常量。
"""

import os
from datetime import timedelta
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off"}

# 临近截止窗口（TaskCard 的 "即将到期" 标记）
DUE_SOON_WINDOW: timedelta = timedelta(days=2)

# 近期任务窗口（统计页 "最近 7 天新建"）
RECENT_WINDOW: timedelta = timedelta(days=7)


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKBOARD_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKBOARD_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskboard.db"),
    )


class StoreConfig(BaseModel):
    """AppStore 配置 -- 从环境变量加载

    环境变量:
        TASKBOARD_DB_PATH: SQLite 数据库路径
        TASKBOARD_KEY_PREFIX: 后端存储 key 前缀（默认 kanban）
        TASKBOARD_SEED_DEMO: 空数据时是否写入演示数据（默认 true）
        TASKBOARD_LOG_FORMAT: 日志格式（dev/json）
        TASKBOARD_LOG_LEVEL: 日志级别（默认 INFO）
    """

    db_path: str = Field(
        default="data/sqlite/taskboard.db",
        description="SQLite 数据库路径",
    )
    key_prefix: str = Field(
        default="kanban",
        min_length=1,
        description="后端存储 key 前缀",
    )
    seed_demo_data: bool = Field(
        default=True,
        description="集合为空时是否写入演示数据",
    )
    log_format: Literal["dev", "json"] = Field(
        default="dev",
        description="日志渲染模式",
    )
    log_level: str = Field(default="INFO", description="日志级别")

    @property
    def users_key(self) -> str:
        return f"{self.key_prefix}-users"

    @property
    def tasks_key(self) -> str:
        return f"{self.key_prefix}-tasks"

    @property
    def boards_key(self) -> str:
        return f"{self.key_prefix}-boards"

    @property
    def current_user_key(self) -> str:
        return f"{self.key_prefix}-current-user"

    @property
    def current_board_key(self) -> str:
        return f"{self.key_prefix}-current-board"


def load_store_config() -> StoreConfig:
    """从环境变量加载 AppStore 配置

    无效值不阻塞启动：记录 warning 后使用默认值。

    Returns:
        StoreConfig 实例
    """
    kwargs: dict = {"db_path": get_db_path()}

    if val := os.environ.get("TASKBOARD_KEY_PREFIX"):
        kwargs["key_prefix"] = val

    if val := os.environ.get("TASKBOARD_SEED_DEMO"):
        flag = val.strip().lower()
        if flag in _TRUE_VALUES:
            kwargs["seed_demo_data"] = True
        elif flag in _FALSE_VALUES:
            kwargs["seed_demo_data"] = False
        else:
            log.warning(
                "invalid_seed_demo_config",
                env_var="TASKBOARD_SEED_DEMO",
                value=val,
                fallback=True,
            )

    if val := os.environ.get("TASKBOARD_LOG_FORMAT"):
        if val in ("dev", "json"):
            kwargs["log_format"] = val
        else:
            log.warning(
                "invalid_log_format_config",
                env_var="TASKBOARD_LOG_FORMAT",
                value=val,
                fallback="dev",
            )

    if val := os.environ.get("TASKBOARD_LOG_LEVEL"):
        kwargs["log_level"] = val.upper()

    return StoreConfig(**kwargs)
