"""版本控制驱动测试 — 模板渲染 / 命令调用 / 驱动查找"""

from __future__ import annotations

from pathlib import Path

import pytest

from snapdeps.core.exceptions import CommandError, ToolMissingError
from snapdeps.services.vcs import GIT, VcsDriver, VcsRegistry, get_registry, render, vcs_for_url


class TestRender:
    def test_substitutes_after_split(self) -> None:
        args = render("clone {repo} {dir} -b {branch}",
                      repo="https://x/lib", dir="/tmp/my dir", branch="v1")
        assert args == ["clone", "https://x/lib", "/tmp/my dir", "-b", "v1"]

    def test_placeholder_inside_token(self) -> None:
        assert render("--branch={branch}", branch="dev") == ["--branch=dev"]

    def test_unknown_placeholder_kept(self) -> None:
        assert render("checkout {commit}") == ["checkout", "{commit}"]


class TestGitDriver:
    def test_create_with_branch(self, tmp_path: Path, fake_git) -> None:
        dst = tmp_path / "src" / "lib"
        dst.parent.mkdir(parents=True)
        GIT.create(dst, "https://x/lib", "v1.2")

        assert fake_git.calls == [
            (["git", "clone", "https://x/lib", str(dst), "-b", "v1.2"], str(dst.parent)),
        ]

    def test_create_with_commit(self, tmp_path: Path, fake_git) -> None:
        dst = tmp_path / "lib"
        GIT.create(dst, "https://x/lib", "sha:abc123")

        assert fake_git.calls == [
            (["git", "clone", "https://x/lib", str(dst), "-b", "master"], str(tmp_path)),
            (["git", "checkout", "abc123"], str(dst)),
        ]

    def test_create_relative_destination(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_git,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        Path("ws", "src").mkdir(parents=True)
        GIT.create(Path("ws", "src", "lib"), "https://x/lib", "v1")

        dst = tmp_path / "ws" / "src" / "lib"
        assert fake_git.calls == [
            (["git", "clone", "https://x/lib", str(dst), "-b", "v1"], str(dst.parent)),
        ]
        assert (dst / ".git").is_dir()

    def test_checkout_and_download(self, tmp_path: Path, fake_git) -> None:
        GIT.checkout(tmp_path, "v2")
        GIT.checkout(tmp_path, "sha:def456")
        GIT.download(tmp_path)

        assert fake_git.argvs == [
            ["git", "checkout", "v2"],
            ["git", "checkout", "def456"],
            ["git", "fetch"],
        ]
        assert {cwd for _, cwd in fake_git.calls} == {str(tmp_path)}

    def test_exists(self, tmp_path: Path) -> None:
        assert not GIT.exists(tmp_path)
        (tmp_path / ".git").mkdir()
        assert GIT.exists(tmp_path)

    def test_tool_missing(self, tmp_path: Path, fake_git) -> None:
        fake_git.available = False
        with pytest.raises(ToolMissingError, match="git"):
            GIT.create(tmp_path / "lib", "https://x/lib", "v1")
        assert fake_git.calls == []

    def test_command_failure_carries_output(self, tmp_path: Path, fake_git) -> None:
        fake_git.fail_on = "checkout"
        fake_git.fail_output = "error: pathspec 'v9' did not match\n"

        with pytest.raises(CommandError) as exc_info:
            GIT.checkout(tmp_path, "v9")

        err = exc_info.value
        assert err.returncode == 128
        assert err.cmdline == "git checkout v9"
        assert "pathspec" in err.output


class TestRegistry:
    @pytest.mark.parametrize("url", [
        "https://github.com/a/b.git",
        "git://host/a",
        "git+ssh://git@host/a",
        "git@github.com:a/b.git",
        "",
    ])
    def test_git_for_known_urls(self, url: str) -> None:
        assert vcs_for_url(url) is GIT

    def test_by_cmd(self) -> None:
        assert get_registry().by_cmd("git") is GIT
        assert get_registry().by_cmd("svn") is None

    def test_register_additional_driver(self) -> None:
        hg = VcsDriver(
            name="Mercurial", cmd="hg",
            create_cmd="clone -U {repo} {dir}", download_cmd="pull",
            checkout_cmd="update -r {commit}", meta_dir=".hg",
        )
        reg = VcsRegistry(default=GIT)
        reg.register(hg, schemes=("hg",))

        assert reg.for_url("hg://host/repo") is hg
        assert reg.for_url("hg+ssh://host/repo") is hg
        assert reg.for_url("https://host/repo") is GIT
        assert reg.by_cmd("hg") is hg
        assert reg.drivers() == [GIT, hg]
