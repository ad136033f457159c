import io
import os
from pathlib import Path

import pytest

from pyminishell.builtins import (
    cd,
    echo,
    env_command,
    exit_code,
    export,
    export_name_length,
    is_builtin,
    is_valid_echo_flag,
    print_declarations,
    pwd,
    run_builtin,
    unset,
)
from pyminishell.environment import Environment


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def env():
    table = Environment({"A": "1"})
    table.assign("B=")
    table.assign("C")
    table.set_status(0)
    return table


@pytest.mark.parametrize("command", ["echo", "cd", "pwd", "export", "unset", "env", "exit", "echo hi"])
def test_is_builtin(command):
    assert is_builtin(command) is True


@pytest.mark.parametrize("command", ["ls", "echoo", "", "/bin/echo"])
def test_is_not_builtin(command):
    assert is_builtin(command) is False


@pytest.mark.parametrize("arg,expected", [
    ("-n", True), ("-nnn", True), ("-", True),
    ("-na", False), ("n", False), ("", False),
])
def test_echo_flag(arg, expected):
    assert is_valid_echo_flag(arg) is expected


@pytest.mark.parametrize("arg,expected", [
    ("A=1", 1), ("AB+=x", 2), ("_x", 2), ("1A=2", 0), ("=x", 0), ("A-B=1", 0), ("+=x", 0),
])
def test_export_name_length(arg, expected):
    assert export_name_length(arg) == expected


def test_echo_prints_arguments(out):
    assert echo(["echo", "a", "b"], out) == 0
    assert out.getvalue() == "a b\n"


def test_echo_flags_suppress_newline(out):
    assert echo(["echo", "-n", "-nn", "a", "-n"], out) == 0
    assert out.getvalue() == "a -n"


def test_echo_without_arguments(out):
    echo(["echo"], out)
    assert out.getvalue() == "\n"


def test_echo_only_flag(out):
    echo(["echo", "-n"], out)
    assert out.getvalue() == ""


def test_env_lists_valued_variables(env, out):
    assert env_command(env, out) == 0
    assert out.getvalue() == "A=1\nB=\n"


def test_print_declarations_sorted(out):
    table = Environment({"Z": "9"})
    table.assign("B=")
    table.assign("C")
    table.assign("A=1")
    table.set_status(3)
    print_declarations(table, out)
    assert out.getvalue() == 'declare -x A="1"\ndeclare -x B=""\ndeclare -x C\ndeclare -x Z="9"\n'


def test_export_assigns(env, out):
    assert export(["export", "D=4"], env, out) == 0
    assert env.get("D") == "4"


def test_export_appends(env, out):
    assert export(["export", "A+=2"], env, out) == 0
    assert env.get("A") == "1" + "2"


def test_export_invalid_name(env, out):
    assert export(["export", "1x"], env, out) == 1
    assert "'1x'" in out.getvalue()
    assert "Not a valid thing" in out.getvalue()
    assert "1x" not in env


def test_export_without_arguments_lists(env, out):
    expected = io.StringIO()
    print_declarations(env, expected)
    assert export(["export"], env, out) == 0
    assert out.getvalue() == expected.getvalue()


def test_unset(env):
    assert unset(["unset", "A"], env) == 0
    assert "A" not in env


def test_unset_missing(env):
    assert unset(["unset", "NOPE", "B"], env) == 1
    assert "B" not in env


def test_pwd(monkeypatch, tmp_path, out):
    monkeypatch.chdir(tmp_path)
    assert pwd(out) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_cd_changes_directory(monkeypatch, tmp_path, env, out):
    monkeypatch.chdir(tmp_path)
    sub = tmp_path / "sub"
    sub.mkdir()
    assert cd(["cd", str(sub)], env, out) == 0
    assert Path(os.getcwd()).resolve() == sub.resolve()
    assert env.get("PWD") == os.getcwd()


def test_cd_home(monkeypatch, tmp_path, out):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    table = Environment({"HOME": str(home)})
    assert cd(["cd"], table, out) == 0
    assert Path(os.getcwd()).resolve() == home.resolve()


def test_cd_missing_directory(monkeypatch, tmp_path, env, out):
    monkeypatch.chdir(tmp_path)
    assert cd(["cd", str(tmp_path / "missing")], env, out) == 1
    assert out.getvalue() == "  err: cd(): Only EXISTING destinations\n"
    assert Path(os.getcwd()).resolve() == tmp_path.resolve()


def test_cd_too_many_arguments(env, out):
    assert cd(["cd", "a", "b"], env, out) == 1
    assert out.getvalue() == "  err: cd(): Not a cd thing\n"


@pytest.mark.parametrize("args,expected", [
    (["exit"], 0), (["exit", "3"], 3), (["exit", "abc"], 255),
    (["exit", "-5"], 255), (["exit", "1", "2"], 1),
])
def test_exit_code(args, expected):
    assert exit_code(args) == expected


def test_run_builtin_dispatch(env, out):
    assert run_builtin(["echo", "x"], env, out) == 0
    assert out.getvalue() == "x\n"
    assert run_builtin(["exit", "5"], env, out) == 5


def test_run_builtin_env_matches_env_command(env, out):
    expected = io.StringIO()
    env_command(env, expected)
    assert run_builtin(["env"], env, out) == 0
    assert out.getvalue() == expected.getvalue()