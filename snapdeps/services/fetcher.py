"""依赖拉取器

职责:
- 把缺失的依赖逐个落地到 <root>/src/<package>
- 已受管的仓库直接切换版本，不存在的目录新建克隆
- 不修改任何快照；合并和保存由调用方负责
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from snapdeps.core.dep.models import Dependency
from snapdeps.core.exceptions import DestinationExistsError
from snapdeps.services.vcs.driver import VcsDriver
from snapdeps.services.vcs.registry import vcs_for_url

logger = logging.getLogger(__name__)

SOURCE_DIR = "src"


class DepFetcher:
    """按顺序拉取一批依赖，遇到第一个错误立即中止"""

    def __init__(self, root: str | Path, vcs_lookup: Callable[[str], VcsDriver] = vcs_for_url) -> None:
        self.root = Path(root).absolute()
        self._vcs_lookup = vcs_lookup

    def destination(self, dep: Dependency) -> Path:
        return self.root / SOURCE_DIR / dep.package

    def fetch(self, deps: Sequence[Dependency]) -> list[Path]:
        """拉取全部依赖，返回各自的目标目录

        顺序必须保持：后面的依赖可能位于前面依赖创建的目录之下。
        已经落地的依赖在后续失败时不回滚。
        """
        done: list[Path] = []
        for dep in deps:
            done.append(self.fetch_one(dep))
        return done

    def fetch_one(self, dep: Dependency) -> Path:
        dst = self.destination(dep)
        vcs = self._vcs_lookup(dep.url)
        if vcs.exists(dst):
            logger.warning("警告: 非受管仓库 '%s'，重置到版本 %s", dst, dep.ref)
            vcs.checkout(dst, dep.ref)
        elif dst.exists():
            raise DestinationExistsError(str(dst))
        else:
            logger.info("创建新仓库 '%s'", dst)
            dst.parent.mkdir(parents=True, exist_ok=True)
            vcs.create(dst, dep.url, dep.ref)
        return dst
