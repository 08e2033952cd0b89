"""依赖记录数据模型

数据类:
- Dependency: 包标识 + 版本引用 + 源地址
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from snapdeps.core.exceptions import SnapshotFormatError


@dataclass(frozen=True)
class Dependency:
    """单个依赖的声明（不可变）"""

    package: str
    ref: str
    url: str = ""

    def satisfies(self, other: Dependency) -> bool:
        """包名和版本一致即视为已满足，不比较 url"""
        return self.package == other.package and self.ref == other.ref

    def __str__(self) -> str:
        return f"{self.package}@{self.ref}"

    @classmethod
    def from_dict(cls, data: Any) -> Dependency:
        """从快照文件中的 {package, version, url} 条目构造"""
        if not isinstance(data, dict):
            raise SnapshotFormatError(f"依赖条目不是字典: {data!r}")
        package = data.get("package")
        if not isinstance(package, str) or not package:
            raise SnapshotFormatError(f"依赖条目缺少 package: {data!r}")
        ref = data.get("version")
        url = data.get("url")
        for key, value in (("version", ref), ("url", url)):
            if value is not None and not isinstance(value, str):
                raise SnapshotFormatError(f"依赖 {package} 的 {key} 必须为字符串: {value!r}")
        return cls(package=package, ref=ref or "", url=url or "")

    def to_dict(self) -> dict[str, str]:
        return {"package": self.package, "version": self.ref, "url": self.url}
