"""CLI — list: 列出各层快照中的依赖"""

from __future__ import annotations

import click

from snapdeps.services.commands import Command, ListArgs


def register(group: click.Group) -> None:
    group.add_command(list_deps)


@click.command(name="list")
def list_deps() -> None:
    """列出每一层快照文件及其依赖"""
    from snapdeps.cli import _run
    for layer in _run(Command.LIST, ListArgs()):
        click.echo(layer.file)
        for dep in layer.dependencies:
            click.echo(f"\t {dep.package}  {dep.url}  {dep.ref}")
