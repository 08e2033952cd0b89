"""集中配置管理

提供统一的配置入口：默认值 → YAML 文件 → SNAPDEPS_* 环境变量。
搜索路径本身来自环境变量（名称由 path_env 指定）。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from snapdeps.core.exceptions import ConfigError
from snapdeps.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "SNAPDEPS_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass
class Config:
    """全局配置"""

    # 每个搜索路径根目录下的快照文件名
    snapshot_file: str = ".snapdeps.yml"
    # 保存搜索路径列表的环境变量
    path_env: str = "SNAPDEPS_PATH"
    # 拉取依赖使用的版本控制工具，空表示按 url 选择
    vcs_cmd: str = ""

    log_level: str = "INFO"
    log_json: bool = False

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """检查字段类型和取值，不合法时抛出 ConfigError"""
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            expected = bool if f.type in ("bool", bool) else str
            if type(value) is not expected:
                raise ConfigError(
                    f"配置项 {f.name} 必须为 {expected.__name__}: {value!r}"
                )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"配置项 log_level 取值无效: {self.log_level!r}，可选: {', '.join(LOG_LEVELS)}"
            )
        if not self.snapshot_file:
            raise ConfigError("配置项 snapshot_file 不能为空")

    @classmethod
    def from_file(cls, path: str) -> Config:
        """从 YAML 文件加载配置，文件不存在则返回默认"""
        if not Path(path).exists():
            return cls()
        try:
            data = load_yaml(path) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"无法读取配置文件 {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"配置文件内容不是字典: {path}")
        known = {f.name for f in fields(cls)} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except ConfigError as e:
            raise ConfigError(f"配置文件 {path}: {e}") from e
        cfg.extra = extra
        return cfg

    def apply_env(self, environ: dict[str, str] | None = None) -> Config:
        """用 SNAPDEPS_<FIELD> 环境变量覆盖同名字段"""
        env = os.environ if environ is None else environ
        for f in fields(self):
            if f.name == "extra":
                continue
            key = ENV_PREFIX + f.name.upper()
            raw = env.get(key)
            if raw is None:
                continue
            value: Any = raw
            if f.type in ("bool", bool):
                value = _parse_bool(key, raw)
            setattr(self, f.name, value)
        self.validate()
        return self

    def search_path(self, environ: dict[str, str] | None = None) -> list[Path]:
        """解析并校验搜索路径，返回根目录列表（顺序即层级顺序）"""
        env = os.environ if environ is None else environ
        raw = env.get(self.path_env, "")
        if not raw:
            raise ConfigError(f"{self.path_env} 为空，请设置 {self.path_env}")

        roots: list[Path] = []
        for entry in raw.split(os.pathsep):
            if not entry:
                continue
            if entry.startswith("~"):
                raise ConfigError(
                    f"{self.path_env} 条目不能以 shell 元字符 '~' 开头: {entry!r}"
                )
            if not os.path.isabs(entry):
                raise ConfigError(
                    f"{self.path_env} 条目是相对路径，必须为绝对路径: {entry!r}"
                )
            roots.append(Path(entry))
        if not roots:
            raise ConfigError(f"{self.path_env} 中没有有效条目")
        return roots


def _parse_bool(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"环境变量 {key} 不是合法的布尔值: {raw!r}")


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "") -> Config:
    """从文件和环境变量初始化全局配置"""
    global _current  # noqa: PLW0603
    cfg = Config.from_file(path) if path else Config()
    _current = cfg.apply_env()
    if path:
        logger.debug("配置已加载: %s", path)
    return _current
