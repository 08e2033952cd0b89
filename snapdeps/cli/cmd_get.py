"""CLI — get: 下载请求文件中声明的依赖"""

from __future__ import annotations

import click

from snapdeps.core.config import get_config
from snapdeps.services.commands import Command, GetArgs


def register(group: click.Group) -> None:
    group.add_command(get)


@click.command()
@click.argument("request_file", type=click.Path(dir_okay=False))
@click.option("--exclude", default="", metavar="REGEXP", help="排除包名匹配该正则的依赖")
@click.option("--root", "root_override", default="", type=click.Path(file_okay=False),
              help="拉取到该目录下的 src/，默认为顶层快照所在目录")
def get(request_file: str, exclude: str, root_override: str) -> None:
    """合并请求文件中的依赖到顶层快照并下载缺失的包"""
    from snapdeps.cli import _run
    args = GetArgs(
        request_file=request_file,
        exclude=exclude,
        root_override=root_override,
        vcs_cmd=get_config().vcs_cmd,
    )
    result = _run(Command.GET, args)
    if result.up_to_date:
        click.echo("所有依赖都已是最新")
        return
    for dep, dst in zip(result.added, result.destinations):
        click.echo(f"就绪: {dep} -> {dst}")
