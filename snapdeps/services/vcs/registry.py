"""版本控制工具注册表

按可执行文件名或源地址的 scheme 查找驱动。目前只注册了 Git，
无法识别的地址回退到默认驱动。
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from snapdeps.services.vcs.driver import GIT, VcsDriver

logger = logging.getLogger(__name__)


class VcsRegistry:
    """scheme / 工具名 → VcsDriver"""

    def __init__(self, default: VcsDriver) -> None:
        self.default = default
        self._by_cmd: dict[str, VcsDriver] = {}
        self._by_scheme: dict[str, VcsDriver] = {}
        self.register(default)

    def register(self, driver: VcsDriver, schemes: tuple[str, ...] = ()) -> None:
        self._by_cmd[driver.cmd] = driver
        for scheme in schemes:
            self._by_scheme[scheme.lower()] = driver

    def by_cmd(self, cmd: str) -> VcsDriver | None:
        return self._by_cmd.get(cmd)

    def for_url(self, url: str) -> VcsDriver:
        """按 URL 选择驱动

        git+ssh://... 之类的复合 scheme 按 '+' 前的部分匹配；
        scp 风格地址 (git@host:path) 没有 scheme，直接使用默认驱动。
        """
        scheme = urlsplit(url).scheme.lower() if "://" in url else ""
        for candidate in (scheme, scheme.split("+", 1)[0]):
            if candidate and candidate in self._by_scheme:
                return self._by_scheme[candidate]
        return self.default

    def drivers(self) -> list[VcsDriver]:
        return list(self._by_cmd.values())


_registry: VcsRegistry | None = None


def get_registry() -> VcsRegistry:
    """获取全局注册表（首次调用时注册内置驱动）"""
    global _registry  # noqa: PLW0603
    if _registry is None:
        _registry = VcsRegistry(default=GIT)
        _registry.register(GIT, schemes=("git", "git+ssh", "ssh", "http", "https", "file"))
    return _registry


def vcs_for_url(url: str) -> VcsDriver:
    return get_registry().for_url(url)
