"""shell.py LocalExecutor 单元测试"""

from __future__ import annotations

from snapdeps.utils.shell import LocalExecutor


class TestLocalExecutor:
    def test_success(self, tmp_path) -> None:
        r = LocalExecutor().execute(["sh", "-c", "echo hello"], cwd=str(tmp_path))
        assert r.success
        assert "hello" in r.output

    def test_combined_output_on_failure(self, tmp_path) -> None:
        r = LocalExecutor().execute(
            ["sh", "-c", "echo out; echo err >&2; exit 3"], cwd=str(tmp_path),
        )
        assert r.returncode == 3
        assert not r.success
        assert "out" in r.output and "err" in r.output

    def test_runs_in_cwd(self, tmp_path) -> None:
        r = LocalExecutor().execute(["pwd"], cwd=str(tmp_path))
        assert r.output.strip() == str(tmp_path.resolve())

    def test_which(self) -> None:
        assert LocalExecutor().which("sh") is not None
        assert LocalExecutor().which("no-such-tool-xyz") is None
