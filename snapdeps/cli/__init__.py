"""snapdeps 命令行接口

CLI 按子命令拆分为模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import logging
from typing import Any

import click

from snapdeps import __version__
from snapdeps.core.config import get_config, init_config
from snapdeps.core.exceptions import SnapdepsError
from snapdeps.core.hierarchy import SnapshotHierarchy
from snapdeps.services.commands import Command, dispatch
from snapdeps.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def _run(command: Command, args: Any) -> Any:
    """构建快照层级并执行子命令；任何错误都转为单行诊断，退出码 1"""
    cfg = get_config()
    try:
        hierarchy = SnapshotHierarchy.from_search_path(cfg.search_path(), cfg.snapshot_file)
        return dispatch(command, hierarchy, args)
    except (SnapdepsError, OSError) as e:
        logger.debug("命令失败", exc_info=True)
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default="", envvar="SNAPDEPS_CONFIG",
              help="配置文件路径 (YAML)")
def main(config_path: str) -> None:
    """snapdeps - 分层依赖快照管理工具"""
    try:
        cfg = init_config(config_path)
    except SnapdepsError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(level=cfg.log_level, json_output=cfg.log_json)


# 注册各子命令
from snapdeps.cli.cmd_get import register as _reg_get  # noqa: E402
from snapdeps.cli.cmd_list import register as _reg_list  # noqa: E402

_reg_get(main)
_reg_list(main)
