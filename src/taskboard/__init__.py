"""taskboard -- 看板任务应用的状态存储

公共入口：create_app_store() 创建并加载 AppStore。
"""

from .app_store import AppStore, OperationResult, create_app_store

__all__ = [
    "AppStore",
    "OperationResult",
    "create_app_store",
]
