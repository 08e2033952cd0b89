"""版本控制工具模块

- driver.py: 命令模板 + 调用（create / download / checkout / exists）
- registry.py: 按工具名或 URL scheme 查找驱动
"""

from snapdeps.services.vcs.driver import GIT, VcsDriver, render
from snapdeps.services.vcs.registry import VcsRegistry, get_registry, vcs_for_url

__all__ = [
    "GIT",
    "VcsDriver",
    "VcsRegistry",
    "get_registry",
    "render",
    "vcs_for_url",
]
