import json
import os
from pathlib import Path

import pytest

from makecomp.command import get_parser, main
from makecomp.completions.generators.bash import generate_bash
from makecomp.index.cache import serialize
from makecomp.index.parsing import parse
from makecomp.models import ExitCode

from .conftest import ANNOTATED_MAKEFILE


@pytest.fixture
def config_file(tmp_path: Path, cache_dir: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(f'[makecomp]\ncache_dir = "{cache_dir}"\n')
    return path


@pytest.fixture
def run(config_file: Path):
    "Runs the CLI, returns the exit code"

    def _run(*argv: str) -> int:
        with pytest.raises(SystemExit) as exc_info:
            main(["--debug", os.devnull, "--config", str(config_file), *argv])
        return exc_info.value.code

    return _run


class TestComplete:
    def test_words(self, run, makefile, capsys):
        code = run("complete", "--file", str(makefile), "--cword", "2", "--", "make", "run", "a")
        assert code == ExitCode.SUCCESS
        assert capsys.readouterr().out == "app=api\napp=worker\n"

    def test_cword_defaults_to_last_word(self, run, makefile, capsys):
        assert run("complete", "--file", str(makefile), "--", "make", "build", "te") == ExitCode.SUCCESS
        assert capsys.readouterr().out.splitlines() == ["test=True", "test=False"]

    def test_line(self, run, makefile, capsys):
        assert run("complete", "--file", str(makefile), "--line", "make r") == ExitCode.SUCCESS
        assert capsys.readouterr().out == "run\n"

    def test_line_trailing_space(self, run, makefile, capsys):
        assert run("complete", "--file", str(makefile), "--line", "make run env=dev ") == ExitCode.SUCCESS
        assert capsys.readouterr().out.splitlines() == [
            "test=True",
            "test=False",
            "env=dev",
            "env=stage",
            "env=prod",
            "app=api",
            "app=worker",
        ]

    def test_current_directory(self, run, makefile, capsys, monkeypatch):
        monkeypatch.chdir(makefile.parent)
        assert run("complete", "--line", "make ") == ExitCode.SUCCESS
        assert capsys.readouterr().out.splitlines() == ["run", "build", "help"]

    def test_cursor_out_of_range(self, run, makefile, capsys):
        assert run("complete", "--file", str(makefile), "--cword", "2", "--", "make") == ExitCode.SUCCESS
        assert capsys.readouterr().out == ""

    def test_unexpected_error_still_exits_0(self, run, makefile, capsys, mocker):
        mocker.patch("makecomp.command.CompletionSession.complete", side_effect=ValueError("boom"))
        assert run("complete", "--file", str(makefile), "--cword", "1", "--", "make", "") == ExitCode.SUCCESS
        assert capsys.readouterr().out == ""

    def test_missing_makefile(self, run, tmp_path, capsys):
        assert run("complete", "--file", str(tmp_path / "nope"), "--line", "make ") == ExitCode.SUCCESS
        assert capsys.readouterr().out == ""

    def test_broken_config_still_completes(self, makefile, tmp_path, capsys):
        broken = tmp_path / "broken.toml"
        broken.write_text("[makecomp\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["--debug", os.devnull, "--config", str(broken), "complete", "--file", str(tmp_path / "nope"), "--line", "make "])
        assert exc_info.value.code == ExitCode.SUCCESS
        assert capsys.readouterr().out == ""

    def test_writes_cache(self, run, makefile, cache_dir, capsys):
        run("complete", "--file", str(makefile), "--line", "make run ")
        assert len(list(cache_dir.glob("*.cache"))) == 1


class TestDump:
    def test_cache_format(self, run, makefile, capsys):
        assert run("dump", "--file", str(makefile)) == ExitCode.SUCCESS
        assert capsys.readouterr().out == serialize(parse(ANNOTATED_MAKEFILE.splitlines()))

    def test_json(self, run, makefile, capsys):
        assert run("dump", "--file", str(makefile), "--json") == ExitCode.SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert [(d["name"], d["scope"]) for d in data] == [("test", "__global__"), ("env", "__global__"), ("app", "run")]
        assert data[1] == {
            "name": "env",
            "scope": "__global__",
            "values": ["dev", "stage", "prod"],
            "type": "enum",
            "required": True,
            "default": None,
        }
        assert data[0]["default"] == "False"

    def test_missing_makefile(self, run, tmp_path, capsys):
        assert run("dump", "--file", str(tmp_path / "nope")) == ExitCode.ENV_ERROR
        assert capsys.readouterr().out == ""

    def test_no_makefile_in_directory(self, run, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert run("dump") == ExitCode.ENV_ERROR

    def test_broken_config(self, makefile, tmp_path):
        broken = tmp_path / "broken.toml"
        broken.write_text("[makecomp\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["--debug", os.devnull, "--config", str(broken), "dump", "--file", str(makefile)])
        assert exc_info.value.code == ExitCode.ENV_ERROR


def test_targets(run, makefile, capsys):
    assert run("targets", "--file", str(makefile)) == ExitCode.SUCCESS
    assert capsys.readouterr().out == "run\nbuild\nhelp\n"


class TestClearCache:
    def test_removes_cache_files(self, run, makefile, cache_dir, capsys):
        run("complete", "--file", str(makefile), "--line", "make run ")
        capsys.readouterr()
        assert run("clear-cache") == ExitCode.SUCCESS
        assert capsys.readouterr().out == f"Removed 1 cache file from {cache_dir}\n"
        assert list(cache_dir.glob("*.cache")) == []

    def test_nothing_to_remove(self, run, cache_dir, capsys):
        assert run("clear-cache") == ExitCode.SUCCESS
        assert capsys.readouterr().out == f"Removed 0 cache files from {cache_dir}\n"


class TestCompgen:
    def test_print(self, run, capsys):
        assert run("compgen", "bash") == ExitCode.SUCCESS
        assert capsys.readouterr().out == generate_bash(["make"]) + "\n"

    def test_write(self, run, tmp_path, capsys):
        target = tmp_path / "out" / "make.bash"
        assert run("compgen", "bash", str(target)) == ExitCode.SUCCESS
        assert target.read_text() == generate_bash(["make"])
        assert "Completions written to" in capsys.readouterr().out

    def test_relative_path(self, run, capsys):
        assert run("compgen", "zsh", "relative/_make") == ExitCode.COMMAND_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Relative path 'relative/_make'" in captured.err

    def test_unknown_shell(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            get_parser().parse_args(["compgen", "tcsh"])
        assert exc_info.value.code == 2


def test_command_required():
    with pytest.raises(SystemExit):
        get_parser().parse_args([])
