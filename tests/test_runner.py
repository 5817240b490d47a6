## ember — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys

import pytest

from ember.paths import LoadPath
from ember.runtime import Runtime
from ember.errors import EmberRuntimeError, EmberParseError
from ember.runner import run, at_exit, format_fault
from ember.options import process_argv
from ember.__main__ import _execute


@pytest.fixture
def rt() -> Runtime:
    return Runtime(load_path=LoadPath())


def test_success_runs_hooks_with_zero(rt):
    statuses = []
    rt.at_exit(statuses.append)
    assert run(lambda: None, rt) == 0
    assert statuses == [0]


def test_no_halt_returns_none_without_hooks(rt):
    statuses = []
    rt.at_exit(statuses.append)
    assert run(lambda: None, rt, halt=False) is None
    assert statuses == []


def test_system_exit_status_reaches_hooks(rt):
    statuses = []
    rt.at_exit(statuses.append)
    assert run(lambda: sys.exit(3), rt, halt=False) == 3
    assert statuses == [3]


def test_system_exit_with_message(rt, capsys):
    assert run(lambda: sys.exit("bye"), rt) == 1
    assert "bye" in capsys.readouterr().err


def test_fault_runs_hooks_then_prints(rt, capsys):
    order = []
    rt.at_exit(lambda status: order.append(('hook', status)))
    def fail():
        order.append(('fail', None))
        rt.eval_string('raise("kaboom")', filename="script.ex")

    assert run(fail, rt) == 1
    assert order == [('fail', None), ('hook', 1)]
    err = capsys.readouterr().err
    assert "** (EmberRuntimeError)" in err
    assert "kaboom" in err
    assert "script.ex:1: in (file)" in err


def test_failing_hook_does_not_stop_others(rt, capsys):
    called = []
    def broken(status): raise ValueError("hook failed")
    rt.at_exit(broken)
    rt.at_exit(called.append)
    assert run(lambda: None, rt) == 0
    assert called == [0]
    assert "** (ValueError)" in capsys.readouterr().err


def test_hooks_registered_by_hooks_are_invoked(rt):
    calls = []
    def outer(status):
        calls.append('outer')
        rt.at_exit(lambda s: calls.append(('inner', s)))
    rt.at_exit(outer)
    at_exit(rt, 5)
    assert calls == ['outer', ('inner', 5)]
    assert rt.flush_at_exit() == []


def test_parse_fault_shows_source_context(tmp_path):
    path = tmp_path / "broken.ex"
    path.write_text("x = 1\ny = = 2\n")
    exc = EmberParseError("Unexpected token", filename=str(path), line=2, column=5, token="=")
    text = format_fault(exc)
    assert "** (EmberParseError)" in text
    assert "    2 |" in text


def test_command_errors_halt_without_hooks(rt, capsys):
    config, _ = process_argv(["--bogus"])
    statuses = []
    rt.at_exit(statuses.append)
    assert run(lambda: _execute(config, rt), rt) == 1
    assert statuses == []
    assert "Unknown option --bogus" in capsys.readouterr().err
    assert run(lambda: _execute(process_argv([])[0], rt), rt) == 0
    assert statuses == [0]
