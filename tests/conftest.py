"""测试共享 fixture — 假的命令执行器，记录 git 调用而不真正执行"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from snapdeps.utils.shell import CommandResult, get_executor, set_executor


class FakeExecutor:
    """记录每次调用的 (argv, cwd)；clone 时创建 <dir>/.git 模拟真实仓库"""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], str]] = []
        self.available = True
        self.fail_on: str = ""
        self.fail_output = "fatal: simulated failure\n"

    def which(self, cmd: str) -> str | None:
        return f"/usr/bin/{cmd}" if self.available else None

    def execute(self, args: list[str], *, cwd: str = ".") -> CommandResult:
        self.calls.append((list(args), cwd))
        if self.fail_on and self.fail_on in args:
            return CommandResult(returncode=128, output=self.fail_output)
        if len(args) > 3 and args[1] == "clone":
            (Path(args[3]) / ".git").mkdir(parents=True)
        return CommandResult(returncode=0, output="")

    @property
    def argvs(self) -> list[list[str]]:
        return [argv for argv, _ in self.calls]


@pytest.fixture()
def fake_git():
    fake = FakeExecutor()
    previous = get_executor()
    set_executor(fake)
    yield fake
    set_executor(previous)


def write_snapshot(path: Path, name: str, version: int, deps: list[tuple[str, str, str]]) -> Path:
    """写一个快照文件；deps 为 (package, ref, url) 三元组"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump({
        "name": name,
        "version": version,
        "dependencies": [
            {"package": p, "version": v, "url": u} for p, v, u in deps
        ],
    }, sort_keys=False))
    return path


@pytest.fixture()
def snapshot_writer():
    return write_snapshot
