"""统一异常体系

所有业务异常继承 SnapdepsError，CLI 层据此输出单行诊断并以非零状态退出。
"""

from __future__ import annotations


class SnapdepsError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(SnapdepsError):
    """配置或搜索路径无效"""

    code = "CONFIG_ERROR"


# =========================================================================
# 快照文件
# =========================================================================

class SnapshotError(SnapdepsError):
    """快照文件读写失败"""

    code = "SNAPSHOT_ERROR"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class SnapshotNotFoundError(SnapshotError):
    """快照文件不存在"""

    code = "SNAPSHOT_NOT_FOUND"


class SnapshotPermissionError(SnapshotError):
    """快照文件无读取权限"""

    code = "SNAPSHOT_PERMISSION"


class SnapshotFormatError(SnapshotError):
    """快照文件内容无法解析"""

    code = "SNAPSHOT_FORMAT"


class SnapshotWriteError(SnapshotError):
    """快照文件写入失败"""

    code = "SNAPSHOT_WRITE"


class ConflictError(SnapdepsError):
    """同一个包在合并时声明了不同的版本"""

    code = "CONFLICT"

    def __init__(self, package: str, existing: str, new: str) -> None:
        super().__init__(f"版本冲突: {package}, 已有 - {existing}, 新的 - {new}")
        self.package = package
        self.existing = existing
        self.new = new


# =========================================================================
# 版本控制工具
# =========================================================================

class VcsError(SnapdepsError):
    """版本控制工具调用失败"""

    code = "VCS_ERROR"


class ToolMissingError(VcsError):
    """找不到版本控制工具的可执行文件"""

    code = "TOOL_MISSING"


class CommandError(VcsError):
    """版本控制命令返回非零状态"""

    code = "COMMAND_FAILED"

    def __init__(self, cmdline: str, returncode: int, output: str = "") -> None:
        super().__init__(f"命令执行失败 (rc={returncode}): {cmdline}")
        self.cmdline = cmdline
        self.returncode = returncode
        self.output = output


class DestinationExistsError(SnapdepsError):
    """目标目录已存在但不受版本控制管理"""

    code = "DESTINATION_EXISTS"

    def __init__(self, path: str) -> None:
        super().__init__(f"目标目录已存在且不是受管仓库: {path}")
        self.path = path
