"""taskboard 异常体系

重名、找不到等数据层问题不走异常（分别返回 OperationResult / no-op），
这里只定义真正的使用错误。后端存储的 I/O 异常原样向上传播。
"""


class TaskboardError(Exception):
    """taskboard 包基础异常"""


class StoreDisposedError(TaskboardError):
    """AppStore 已释放后仍被调用"""

    def __init__(self, operation: str) -> None:
        """
        Args:
            operation: 被拒绝的操作名
        """
        super().__init__(f"AppStore 已释放，无法执行: {operation}")
        self.operation = operation


class NoBoardError(TaskboardError):
    """新建任务时既没有指定看板，也不存在任何看板"""

    def __init__(self) -> None:
        super().__init__("没有可用的看板，无法创建任务")
