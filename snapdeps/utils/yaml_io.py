"""YAML 文件统一读写工具

集中管理快照文件的序列化/反序列化。
统一 encoding="utf-8"、整文件原子覆盖写入。
读取时不做容错：文件缺失、无权限、格式错误都原样抛给调用方分类处理。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# YAML 文件最大大小限制 (10MB)，防止异常大文件导致内存耗尽
MAX_YAML_SIZE = 10 * 1024 * 1024

_NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")


class TextScalarLoader(yaml.SafeLoader):
    """不把未加引号的数字隐式转换为 int/float，保留原始文本

    1.10、010 这样的版本号按字符串读入，不会变成 1.1、8。
    """


TextScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写临时文件再 rename，防止中途崩溃导致损坏

    参数:
        path: 目标文件路径（父目录必须已存在）
        content: 要写入的内容

    异常:
        OSError: 文件写入或移动失败
    """
    fd, tmp = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp, 0o644)
        os.replace(tmp, str(path))
    except Exception:
        # 只捕获普通异常，不拦截 KeyboardInterrupt/SystemExit
        try:
            os.unlink(tmp)
        except OSError:
            # 临时文件清理失败不影响原异常抛出
            pass
        raise


def load_yaml(path: str | Path, loader: type = yaml.SafeLoader) -> Any:
    """读取 YAML 文件并返回解析结果（空文件返回 None）

    loader 默认为 SafeLoader；快照文件使用 TextScalarLoader 保留数字原文。

    异常:
        FileNotFoundError: 文件不存在
        PermissionError: 无读取权限
        yaml.YAMLError: YAML 格式错误
        ValueError: 文件过大（超过 MAX_YAML_SIZE）
    """
    p = Path(path)
    file_size = p.stat().st_size
    if file_size > MAX_YAML_SIZE:
        raise ValueError(
            f"YAML 文件过大: {p} ({file_size} 字节), "
            f"超过限制 {MAX_YAML_SIZE} 字节"
        )

    with open(p, encoding="utf-8") as f:
        return yaml.load(f, Loader=loader)  # noqa: S506


def dump_yaml(data: Any) -> str:
    """序列化为 YAML 文本，保持键顺序"""
    return yaml.dump(
        data, default_flow_style=False,
        allow_unicode=True, sort_keys=False,
    )


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入 YAML 文件

    异常:
        OSError: 文件写入失败（含 PermissionError）
        yaml.YAMLError: YAML 序列化失败
    """
    p = Path(path)
    content = dump_yaml(data)
    try:
        atomic_write(p, content)
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", path, e)
        raise
