import os

import pytest

from pyminishell.paths import count_words, find_in_path, resolve_command


@pytest.fixture
def bindir(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    prog = bin_dir / "prog"
    prog.write_text("#!/bin/sh\n")
    prog.chmod(0o755)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return bin_dir


def test_count_words():
    assert count_words("ls  -l  a", " ") == 3
    assert count_words("  one ", " ") == 1


def test_count_words_empty():
    assert count_words("", " ") == 0
    assert count_words(None, " ") == 0
    assert count_words("   ", " ") == 0


def test_find_in_path_directory(bindir):
    found = find_in_path("prog", {"PATH": str(bindir)}, "PATH", os.X_OK)
    assert found == str(bindir / "prog")


def test_find_in_path_trailing_slash(bindir):
    found = find_in_path("prog", {"PATH": str(bindir) + "/"}, "PATH", os.X_OK)
    assert found == str(bindir) + "/prog"


def test_find_in_path_searches_in_order(bindir, tmp_path):
    other = tmp_path / "other"
    other.mkdir()
    environ = {"PATH": f"{other}:{bindir}"}
    assert find_in_path("prog", environ, "PATH", os.X_OK) == str(bindir / "prog")


def test_find_in_path_missing(bindir):
    assert find_in_path("nosuch", {"PATH": str(bindir)}, "PATH", os.X_OK) is None


def test_find_in_path_without_variable(bindir, monkeypatch):
    monkeypatch.chdir(bindir)
    assert find_in_path("prog", {}, "PATH", os.X_OK) == "prog"
    assert find_in_path("nosuch", {}, "PATH", os.X_OK) is None


def test_find_in_path_dot_slash_skips_search(bindir, monkeypatch):
    assert find_in_path("./prog", {"PATH": str(bindir)}, "PATH", os.X_OK) is None
    monkeypatch.chdir(bindir)
    assert find_in_path("./prog", {"PATH": "/nonexistent"}, "PATH", os.X_OK) == "./prog"


def test_find_in_path_relative_file_first(bindir, monkeypatch):
    monkeypatch.chdir(bindir)
    assert find_in_path("prog", {"PATH": "/nonexistent"}, "PATH", os.X_OK) == "prog"


def test_resolve_command_found(bindir):
    result = resolve_command(["prog", "a", "b"], {"PATH": str(bindir)})
    assert result == [str(bindir / "prog"), "a", "b"]


def test_resolve_command_strips_quotes(bindir):
    result = resolve_command(['"prog"'], {"PATH": str(bindir)})
    assert result == [str(bindir / "prog")]


def test_resolve_command_builtin_kept(bindir):
    assert resolve_command(["echo", "hi"], {"PATH": str(bindir)}) == ["echo", "hi"]


def test_resolve_command_not_found_kept(bindir):
    assert resolve_command(["nosuch", "x"], {"PATH": str(bindir)}) == ["nosuch", "x"]


def test_resolve_command_empty():
    assert resolve_command([], {}) == [""]
    assert resolve_command(["", "x"], {}) == ["", "x"]