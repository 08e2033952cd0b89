"""子命令处理

每个子命令是一个纯函数 handler(hierarchy, args) -> result，
通过 Command 枚举到 handler 的映射分派。参数解析和输出由 CLI 层负责。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from snapdeps.core.dep.models import Dependency
from snapdeps.core.exceptions import ConfigError, SnapdepsError
from snapdeps.core.hierarchy import SnapshotHierarchy
from snapdeps.core.snapshot import Snapshot
from snapdeps.services.fetcher import DepFetcher
from snapdeps.services.vcs.driver import VcsDriver
from snapdeps.services.vcs.registry import get_registry, vcs_for_url

logger = logging.getLogger(__name__)


class Command(str, Enum):
    GET = "get"
    LIST = "list"


# =========================================================================
# get
# =========================================================================

@dataclass
class GetArgs:
    request_file: str
    exclude: str = ""
    # 非空时拉取到 <root_override>/src，而不是 top 快照所在目录
    root_override: str = ""
    # 非空时所有依赖都用该工具拉取，否则按 url 选择
    vcs_cmd: str = ""


@dataclass
class GetResult:
    added: list[Dependency] = field(default_factory=list)
    destinations: list[Path] = field(default_factory=list)
    top_file: Path | None = None

    @property
    def up_to_date(self) -> bool:
        return not self.added


def _filter_excluded(deps: list[Dependency], pattern: str) -> list[Dependency]:
    try:
        reg = re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"exclude 参数不是合法的正则表达式: {pattern!r} ({e})") from e
    kept = [dep for dep in deps if not reg.search(dep.package)]
    for dep in deps:
        if dep not in kept:
            logger.info("已排除: %s", dep)
    return kept


def _vcs_lookup(vcs_cmd: str) -> Callable[[str], VcsDriver]:
    if not vcs_cmd:
        return vcs_for_url
    driver = get_registry().by_cmd(vcs_cmd)
    if driver is None:
        known = ", ".join(d.cmd for d in get_registry().drivers())
        raise ConfigError(f"不支持的版本控制工具 {vcs_cmd!r}，可选: {known}")
    return lambda _url: driver


def run_get(hierarchy: SnapshotHierarchy, args: GetArgs) -> GetResult:
    """把请求文件中尚未满足的依赖合并进 top 层并拉取到本地

    流程: 加载请求文件 → 计算缺失集 → (排除) → 合并到 top（冲突即中止）
    → 拉取 → 保存 top。拉取失败时 top 文件不会被写入。
    root_override 只改变拉取目录，合并仍写入 top 快照。
    """
    top = hierarchy.top()
    if top is None or top.path is None:
        raise SnapdepsError("无法加载或创建快照文件，请检查权限")
    vcs_lookup = _vcs_lookup(args.vcs_cmd)

    request = Snapshot.from_file(args.request_file)

    missing = hierarchy.missing(request.dependencies)
    if args.exclude:
        missing = _filter_excluded(missing, args.exclude)
    if not missing:
        logger.info("所有依赖都已是最新")
        return GetResult(top_file=top.path)

    added = top.update(request.name, missing)

    logger.info("目标快照: %s", top.path)
    root = Path(args.root_override) if args.root_override else top.path.parent
    fetcher = DepFetcher(root, vcs_lookup=vcs_lookup)
    destinations = fetcher.fetch(added)

    top.save()
    logger.info("快照已更新: %s (version=%d)", top.path, top.revision)
    return GetResult(added=added, destinations=destinations, top_file=top.path)


# =========================================================================
# list
# =========================================================================

@dataclass
class ListArgs:
    pass


@dataclass
class LayerListing:
    file: str
    dependencies: list[Dependency]


def run_list(hierarchy: SnapshotHierarchy, args: ListArgs) -> list[LayerListing]:
    """列出每一层的文件名及其依赖"""
    return [
        LayerListing(
            file=layer.path.name if layer.path is not None else "",
            dependencies=list(layer.dependencies),
        )
        for layer in hierarchy
    ]


# =========================================================================
# 分派
# =========================================================================

COMMANDS: dict[Command, Callable[[SnapshotHierarchy, Any], Any]] = {
    Command.GET: run_get,
    Command.LIST: run_list,
}


def dispatch(command: Command | str, hierarchy: SnapshotHierarchy, args: Any) -> Any:
    try:
        handler = COMMANDS[Command(command)]
    except ValueError as e:
        raise ConfigError(f"未知子命令 {command!r}") from e
    return handler(hierarchy, args)
