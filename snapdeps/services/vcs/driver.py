"""版本控制工具驱动

VcsDriver 描述如何调用一种版本控制工具：命令模板中的 {key} 在按空白拆分
成参数之后才替换，因此替换值即使包含空格也仍是单个参数。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from snapdeps.core.exceptions import CommandError, ToolMissingError
from snapdeps.utils.shell import get_executor

logger = logging.getLogger(__name__)


def render(template: str, **values: str) -> list[str]:
    """把命令模板渲染为参数列表"""
    args = template.split()
    for i, arg in enumerate(args):
        for key, value in values.items():
            arg = arg.replace("{" + key + "}", value)
        args[i] = arg
    return args


@dataclass(frozen=True)
class VcsDriver:
    """一种版本控制工具的调用方式（无状态）"""

    name: str
    cmd: str                    # 可执行文件名

    create_cmd: str             # 克隆一个全新的仓库
    download_cmd: str           # 在已有仓库中拉取更新
    checkout_cmd: str           # 切换到指定版本

    meta_dir: str               # 仓库内部状态目录，用于判断目录是否受管
    hash_prefix: str = "sha:"   # 以此前缀开头的版本引用表示精确的 commit
    default_branch: str = "master"

    def exists(self, dst: str | Path) -> bool:
        """dst 是否已经是本工具管理的仓库"""
        return (Path(dst) / self.meta_dir).exists()

    def create(self, dst: str | Path, url: str, ref: str) -> None:
        """在 dst 克隆新仓库；dst 的父目录必须已存在，dst 本身不能存在

        命令在 dst 的父目录中执行，传给工具的 dst 先转为绝对路径。

        ref 为 sha:<commit> 时先克隆默认分支，再切换到该 commit。
        """
        dst = Path(dst).absolute()
        branch, commit = self._split_ref(ref)
        self._run(
            dst.parent, self.create_cmd,
            dir=str(dst), repo=url, branch=branch,
        )
        if commit:
            self._run(dst, self.checkout_cmd, commit=commit)

    def checkout(self, dst: str | Path, ref: str) -> None:
        """把已有仓库切换到 ref"""
        branch, commit = self._split_ref(ref)
        self._run(Path(dst), self.checkout_cmd, commit=commit or branch)

    def download(self, dst: str | Path) -> None:
        """在已有仓库中拉取更新"""
        self._run(Path(dst), self.download_cmd)

    def _split_ref(self, ref: str) -> tuple[str, str]:
        """拆分为 (分支/标签, commit)，二者只有一个有意义"""
        if ref.startswith(self.hash_prefix):
            return self.default_branch, ref[len(self.hash_prefix):]
        return ref, ""

    def _run(
        self,
        cwd: Path,
        template: str,
        **values: str,
    ) -> str:
        """在 cwd 中执行命令模板，返回合并后的输出

        失败时记录命令行和完整输出，并抛出 CommandError。
        """
        executor = get_executor()
        if executor.which(self.cmd) is None:
            logger.error("缺少 %s 命令，请先安装 %s 并确认其在 PATH 中", self.cmd, self.name)
            raise ToolMissingError(
                f"找不到 {self.name} 可执行文件 '{self.cmd}'，请安装后重试"
            )

        args = render(template, **values)
        cmdline = " ".join([self.cmd, *args])
        logger.debug("# cd %s; %s", cwd, cmdline)
        result = executor.execute([self.cmd, *args], cwd=str(cwd))
        if not result.success:
            logger.error("# cd %s; %s\n%s", cwd, cmdline, result.output.rstrip())
            raise CommandError(cmdline, result.returncode, result.output)
        return result.output


# Git
GIT = VcsDriver(
    name="Git",
    cmd="git",
    create_cmd="clone {repo} {dir} -b {branch}",
    download_cmd="fetch",
    checkout_cmd="checkout {commit}",
    meta_dir=".git",
)
