"""SQLite 后端存储测试

测试内容：
1. 读写 / 覆盖 / 缺失 key
2. 关闭连接 → 重新打开 → 数据完整
3. WAL 模式验证
4. AppStore 跨进程重启保留数据
"""

from pathlib import Path

import aiosqlite
from taskboard import create_app_store
from taskboard.store import open_sqlite_kv
from taskboard.store.sqlite_init import init_db, verify_wal_mode


class TestSqliteKeyValueStore:
    async def test_missing_key_returns_none(self, tmp_db_path: Path):
        kv = await open_sqlite_kv(tmp_db_path)
        try:
            assert await kv.get("kanban-users") is None
        finally:
            await kv.close()

    async def test_set_overwrites(self, tmp_db_path: Path):
        kv = await open_sqlite_kv(tmp_db_path)
        try:
            await kv.set("kanban-tasks", [{"id": "T1"}])
            await kv.set("kanban-tasks", [{"id": "T2"}, {"id": "T3"}])
            assert await kv.get("kanban-tasks") == [{"id": "T2"}, {"id": "T3"}]
            assert await kv.keys() == ["kanban-tasks"]
        finally:
            await kv.close()

    async def test_null_value_reads_as_none(self, tmp_db_path: Path):
        kv = await open_sqlite_kv(tmp_db_path)
        try:
            await kv.set("kanban-current-user", "U1")
            await kv.set("kanban-current-user", None)
            assert await kv.get("kanban-current-user") is None
        finally:
            await kv.close()

    async def test_unicode_preserved(self, tmp_db_path: Path):
        kv = await open_sqlite_kv(tmp_db_path)
        try:
            await kv.set("kanban-boards", [{"name": "主看板"}])
            assert await kv.get("kanban-boards") == [{"name": "主看板"}]
        finally:
            await kv.close()

    async def test_invalid_json_reads_as_none(self, tmp_db_path: Path):
        """被外部写坏的值按缺失处理"""
        kv = await open_sqlite_kv(tmp_db_path)
        try:
            await kv.conn.execute(
                "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                ("kanban-users", "{not json", "2026-01-01T00:00:00+00:00"),
            )
            await kv.conn.commit()
            assert await kv.get("kanban-users") is None
        finally:
            await kv.close()

    async def test_creates_parent_directory(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "dir" / "kv.db"
        kv = await open_sqlite_kv(db_path)
        await kv.close()
        assert db_path.exists()


class TestDurability:
    """进程重启后数据不丢失"""

    async def test_data_survives_restart(self, tmp_db_path: Path):
        """写入 → 关闭 → 重新打开 → 数据完整"""
        kv1 = await open_sqlite_kv(tmp_db_path)
        await kv1.set("kanban-current-board", "B1")
        await kv1.set("kanban-tasks", [{"id": "T1", "title": "持久性测试任务"}])
        # 关闭连接（模拟进程终止）
        await kv1.close()

        kv2 = await open_sqlite_kv(tmp_db_path)
        try:
            assert await kv2.get("kanban-current-board") == "B1"
            assert await kv2.get("kanban-tasks") == [{"id": "T1", "title": "持久性测试任务"}]
        finally:
            await kv2.close()

    async def test_wal_mode_enabled(self, tmp_path: Path):
        """WAL 模式验证"""
        conn = await aiosqlite.connect(str(tmp_path / "wal.db"))
        await init_db(conn)
        try:
            assert await verify_wal_mode(conn) is True
        finally:
            await conn.close()

    async def test_init_db_idempotent(self, tmp_db_path: Path):
        kv = await open_sqlite_kv(tmp_db_path)
        await kv.set("k", 1)
        # 重复初始化不影响已有数据
        await init_db(kv.conn)
        assert await kv.get("k") == 1
        await kv.close()

    async def test_app_store_survives_restart(self, tmp_db_path: Path, clock):
        kv1 = await open_sqlite_kv(tmp_db_path)
        store1 = await create_app_store(kv1, clock=clock)
        task = await store1.add_task({"title": "跨重启任务", "priority": "medium"})
        await store1.login("user@kanban.com")
        user_id = store1.current_user.id
        await store1.dispose()
        await kv1.close()

        kv2 = await open_sqlite_kv(tmp_db_path)
        store2 = await create_app_store(kv2, clock=clock)
        try:
            restored = store2.get_task(task.id)
            assert restored == task
            assert len(store2.tasks) == 3
            assert len(store2.users) == 2
            assert store2.current_user.id == user_id
        finally:
            await store2.dispose()
            await kv2.close()
