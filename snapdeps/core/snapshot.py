"""依赖快照

一个快照对应一个 YAML 文件：

    name: app
    version: 3
    dependencies:
      - package: libA
        version: v1
        url: https://x/libA

version 是快照自身的修订号，每次成功合并加一；
依赖条目中的 version 是该依赖的版本引用（分支、标签或 sha:<commit>）。
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable

import yaml

from snapdeps.core.dep.models import Dependency
from snapdeps.core.exceptions import (
    ConflictError,
    SnapshotFormatError,
    SnapshotNotFoundError,
    SnapshotPermissionError,
    SnapshotWriteError,
)
from snapdeps.utils.yaml_io import TextScalarLoader, load_yaml, save_yaml

logger = logging.getLogger(__name__)

_REVISION_RE = re.compile(r"\d+")


class Snapshot:
    """单个快照文件的内存表示

    dependencies 保持文件中的顺序；_index 按包名索引，随加载和合并一起重建/更新，
    不对外暴露。
    """

    def __init__(
        self,
        name: str = "",
        revision: int = 0,
        dependencies: Iterable[Dependency] = (),
        path: str | Path | None = None,
    ) -> None:
        self.name = name
        self.revision = revision
        self.path = Path(path) if path is not None else None
        self._deps: list[Dependency] = list(dependencies)
        self._index: dict[str, Dependency] = {}
        self._rebuild_index()

    @classmethod
    def from_file(cls, path: str | Path) -> Snapshot:
        snap = cls()
        snap.load(path)
        return snap

    @property
    def dependencies(self) -> tuple[Dependency, ...]:
        return tuple(self._deps)

    def __len__(self) -> int:
        return len(self._deps)

    def __repr__(self) -> str:
        return (
            f"Snapshot(name={self.name!r}, revision={self.revision}, "
            f"deps={len(self._deps)}, path={str(self.path)!r})"
        )

    # ---- 读写 ----

    def load(self, path: str | Path) -> None:
        """从文件加载快照内容并重建索引

        异常:
            SnapshotNotFoundError: 文件不存在
            SnapshotPermissionError: 无读取权限
            SnapshotFormatError: 内容无法解析
        """
        p = Path(path)
        try:
            data = load_yaml(p, TextScalarLoader)
        except FileNotFoundError as e:
            raise SnapshotNotFoundError(f"快照文件不存在: {p}", str(p)) from e
        except PermissionError as e:
            raise SnapshotPermissionError(f"无权读取快照文件: {p}", str(p)) from e
        except IsADirectoryError as e:
            raise SnapshotFormatError(f"快照路径是目录: {p}", str(p)) from e
        except OSError as e:
            raise SnapshotFormatError(f"无法读取快照文件: {p}: {e}", str(p)) from e
        except (yaml.YAMLError, ValueError, UnicodeDecodeError) as e:
            raise SnapshotFormatError(f"快照文件格式错误: {p}: {e}", str(p)) from e

        try:
            name, revision, deps = self._parse(data)
        except SnapshotFormatError as e:
            raise SnapshotFormatError(f"快照文件格式错误: {p}: {e}", str(p)) from e

        self.name = name
        self.revision = revision
        self._deps = deps
        self.path = p
        self._rebuild_index()
        logger.debug("已加载快照 %s: %d 个依赖", p, len(self._deps))

    @staticmethod
    def _parse(data: Any) -> tuple[str, int, list[Dependency]]:
        """宽松解析：未知字段忽略，空文件视为空快照"""
        if data is None:
            return "", 0, []
        if not isinstance(data, dict):
            raise SnapshotFormatError(f"顶层不是字典 (实际类型: {type(data).__name__})")

        name = data.get("name") or ""
        if not isinstance(name, str):
            name = str(name)

        raw_revision = data.get("version")
        if raw_revision is None:
            revision = 0
        elif isinstance(raw_revision, str) and _REVISION_RE.fullmatch(raw_revision):
            revision = int(raw_revision)
        else:
            raise SnapshotFormatError(f"version 必须为非负整数: {raw_revision!r}")

        raw_deps = data.get("dependencies") or []
        if not isinstance(raw_deps, list):
            raise SnapshotFormatError("dependencies 必须为列表")
        return name, revision, [Dependency.from_dict(d) for d in raw_deps]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.revision,
            "dependencies": [d.to_dict() for d in self._deps],
        }

    def save(self) -> None:
        """保存到当前绑定的文件"""
        if self.path is None:
            raise SnapshotWriteError("快照没有绑定文件路径")
        self.save_to(self.path)

    def save_to(self, path: str | Path) -> None:
        """保存到指定文件（整文件覆盖），成功后绑定到该路径"""
        p = Path(path)
        try:
            save_yaml(p, self.to_dict())
        except (OSError, yaml.YAMLError) as e:
            raise SnapshotWriteError(f"无法写入快照文件 {p}: {e}", str(p)) from e
        self.path = p
        logger.debug("快照已保存: %s (version=%d)", p, self.revision)

    # ---- 查询 / 合并 ----

    def contains(self, dep: Dependency) -> bool:
        """快照中是否已有同名同版本的依赖"""
        existing = self._index.get(dep.package)
        return existing is not None and existing.satisfies(dep)

    def get(self, package: str) -> Dependency | None:
        return self._index.get(package)

    def update(self, name: str, deps: Iterable[Dependency]) -> list[Dependency]:
        """合并依赖，返回本次新增的记录

        全部校验通过才写入：任意一个包与已有记录（或同批次前面的记录）版本不一致，
        抛出 ConflictError，快照保持不变。
        成功时 revision 加一（即使没有新增），name 为空时采用传入的 name。
        """
        pending: dict[str, Dependency] = {}
        added: list[Dependency] = []
        for dep in deps:
            existing = self._index.get(dep.package) or pending.get(dep.package)
            if existing is not None:
                if existing.satisfies(dep):
                    continue
                raise ConflictError(dep.package, existing.ref, dep.ref)
            pending[dep.package] = dep
            added.append(dep)

        for dep in added:
            self._index[dep.package] = dep
            self._deps.append(dep)
        if name and not self.name:
            self.name = name
        self.revision += 1
        return added

    def _rebuild_index(self) -> None:
        # 文件中重复的包名以最后一条为准，列表中只保留一条
        self._index = {dep.package: dep for dep in self._deps}
        if len(self._index) != len(self._deps):
            logger.warning("快照中存在重复的包名，以最后一条为准: %s", self.path)
            self._deps = list(self._index.values())
