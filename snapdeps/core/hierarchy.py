"""快照层级

沿搜索路径发现的有序快照列表。第一层是 top：合并结果只写入 top，
其余层只参与"是否已满足"的查询。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from snapdeps.core.dep.models import Dependency
from snapdeps.core.exceptions import SnapshotFormatError, SnapshotNotFoundError
from snapdeps.core.snapshot import Snapshot

logger = logging.getLogger(__name__)


class SnapshotHierarchy:
    """快照层级，独占持有各层 Snapshot 实例"""

    def __init__(self) -> None:
        self._layers: list[Snapshot] = []

    @classmethod
    def from_search_path(cls, roots: Iterable[Path], filename: str) -> SnapshotHierarchy:
        """按搜索路径顺序加载每个根目录下的快照文件"""
        hierarchy = cls()
        for root in roots:
            hierarchy.append(Path(root) / filename)
        return hierarchy

    def append(self, path: str | Path) -> Snapshot:
        """加载 path 并追加为新的一层

        - 文件不存在：追加绑定到 path 的空快照（第一层即为可写的 top）
        - 第一层格式错误：同样追加为空快照，保证层级总有可用的 top
        - 其他错误（无权限、非第一层格式错误）直接抛出，不追加
        """
        p = Path(path)
        try:
            snap = Snapshot.from_file(p)
        except SnapshotNotFoundError:
            logger.debug("快照文件不存在，作为空层: %s", p)
            snap = Snapshot(path=p)
        except SnapshotFormatError as e:
            if self._layers:
                raise
            logger.warning("警告: 无法解析快照文件 '%s'，作为空快照处理: %s", p, e)
            snap = Snapshot(path=p)
        self._layers.append(snap)
        return snap

    def top(self) -> Snapshot | None:
        return self._layers[0] if self._layers else None

    def contains(self, dep: Dependency) -> bool:
        """任意一层已包含该依赖即返回 True"""
        return any(layer.contains(dep) for layer in self._layers)

    def missing(self, deps: Iterable[Dependency]) -> list[Dependency]:
        """返回尚未被任何一层满足的依赖，保持原有顺序"""
        return [dep for dep in deps if not self.contains(dep)]

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)
