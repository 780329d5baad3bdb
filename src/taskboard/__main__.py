"""CLI 入口模块 -- python -m taskboard <command>

支持的命令：
  seed    加载数据库（空库写入演示数据）
  show    显示会话、看板和当前看板任务
  report  显示当前看板统计
"""

import asyncio
import sys

from . import views
from .app_store import AppStore, create_app_store
from .config import StoreConfig, load_store_config
from .logging_config import setup_logging
from .store import open_sqlite_kv

_COMMANDS = {
    "seed": "加载数据库（空库写入演示数据）",
    "show": "显示会话、看板和当前看板任务",
    "report": "显示当前看板统计",
}


def _usage() -> None:
    print("用法: python -m taskboard <command>")
    print("命令:")
    for name, help_text in _COMMANDS.items():
        print(f"  {name:<8}{help_text}")


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        _usage()
        sys.exit(1)

    command = sys.argv[1]
    if command not in _COMMANDS:
        print(f"未知命令: {command}")
        print(f"可用命令: {', '.join(_COMMANDS)}")
        sys.exit(1)

    config = load_store_config()
    setup_logging(config.log_format, config.log_level, key_prefix=config.key_prefix)
    asyncio.run(run_command(command, config))


async def run_command(command: str, config: StoreConfig) -> None:
    """打开数据库、加载 AppStore 并执行命令"""
    kv = await open_sqlite_kv(config.db_path)
    try:
        store = await create_app_store(kv, config=config)
        try:
            if command == "seed":
                print(f"数据库路径: {config.db_path}")
                print(
                    f"用户 {len(store.users)} / 看板 {len(store.boards)} / "
                    f"任务 {len(store.tasks)}"
                )
            elif command == "show":
                _print_board(store)
            elif command == "report":
                _print_report(store)
        finally:
            await store.dispose()
    finally:
        await kv.close()


def _print_board(store: AppStore) -> None:
    user = store.current_user
    print(f"当前用户: {user.name} <{user.email}>" if user else "当前用户: (未登录)")
    for board in store.boards:
        marker = "*" if board.id == store.current_board_id else " "
        print(f"{marker} {board.name}  [{board.id}]")

    columns = views.tasks_by_status(store.get_current_board_tasks())
    for status, tasks in columns.items():
        print(f"\n== {status.value} ({len(tasks)})")
        for task in tasks:
            pin = "[置顶] " if task.is_pinned else ""
            print(f"  {pin}{task.title}  [{task.priority.value}]")


def _print_report(store: AppStore) -> None:
    report = store.report()
    print(f"任务总数: {report.total}")
    print(f"完成率: {report.completion_rate}%")
    print(f"已逾期: {report.overdue}  即将到期: {report.due_soon}  近 7 天新建: {report.recent}")
    for status, count in report.by_status.items():
        print(f"  {status.value:<12}{count}")
    for stats in report.users:
        print(f"  {stats.name}: {stats.completed}/{stats.total} ({stats.completion_rate}%)")


if __name__ == "__main__":
    main()
