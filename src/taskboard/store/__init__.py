"""taskboard Store -- 后端 key-value 存储实现

提供工厂函数打开 SQLite 存储。
"""

from pathlib import Path

import aiosqlite

from .memory_kv import MemoryKeyValueStore
from .protocols import JSONValue, KeyValueStore
from .sqlite_init import init_db
from .sqlite_kv import SqliteKeyValueStore


async def open_sqlite_kv(db_path: str | Path) -> SqliteKeyValueStore:
    """打开（必要时创建）SQLite key-value 存储

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        SqliteKeyValueStore 实例，由调用方负责 close()
    """
    # 确保数据库目录存在
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(db_path))
    await init_db(conn)

    return SqliteKeyValueStore(conn)


__all__ = [
    "JSONValue",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "init_db",
    "open_sqlite_kv",
]
