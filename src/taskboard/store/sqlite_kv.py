"""KeyValueStore SQLite 实现

每个 key 一行，值为 JSON 文本。set 即提交，读写对调用方都是同步完成的。
"""

import json
from datetime import UTC, datetime

import aiosqlite

from .protocols import JSONValue


class SqliteKeyValueStore:
    """KeyValueStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    @property
    def conn(self) -> aiosqlite.Connection:
        return self._conn

    async def get(self, key: str) -> JSONValue | None:
        """读取 key 对应的 JSON 值

        存储内容不是合法 JSON 时返回 None（由调用方按空数据处理）。
        """
        cursor = await self._conn.execute(
            "SELECT value FROM kv WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            return None

    async def set(self, key: str, value: JSONValue) -> None:
        """整体覆盖写入并提交"""
        await self._conn.execute(
            """
            INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                           updated_at = excluded.updated_at
            """,
            (
                key,
                json.dumps(value, ensure_ascii=False),
                datetime.now(UTC).isoformat(),
            ),
        )
        await self._conn.commit()

    async def keys(self) -> list[str]:
        """列出所有 key（调试 / CLI 使用）"""
        cursor = await self._conn.execute("SELECT key FROM kv ORDER BY key")
        rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def close(self) -> None:
        await self._conn.close()
