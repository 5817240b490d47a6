## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# ember — Top-level wrapper that runs a function, invokes exit hooks and turns faults into a status.
#

import sys
import traceback
from typing import Callable

from .errors import EmberParseError
from .parser import format_parse_error_context


def format_fault(exc: BaseException) -> str:
    lines = [f"\033[30;41m ** ({type(exc).__name__}) \033[0m {exc}"]
    if isinstance(exc, EmberParseError) and exc.filename and exc.line:
        try:
            lines.append(format_parse_error_context(exc.filename, exc.line, exc.column, exc.token))
        except OSError:
            pass
    for filename, line, name in getattr(exc, 'ember_trace', []):
        lines.append(f"\033[97m    {filename or '(unknown)'}:{line if line is not None else '?'}: in {name}\033[0m")
    tb_lines = traceback.format_exception(exc, chain=False)
    internal = [l for l in tb_lines[1:-1] if "/ember/" not in l and "<frozen" not in l]
    if internal:
        lines.append(''.join(internal).rstrip())
    return '\n'.join(lines)


def print_fault(exc: BaseException, file=None) -> None:
    print(format_fault(exc), file=sys.stderr if file is None else file)


def at_exit(runtime, status: int) -> None:
    """Call every exit hook with `status`; hooks registered meanwhile are called too."""
    while hooks := runtime.flush_at_exit():
        for hook in hooks:
            try:
                hook(status)
            except Exception as exc:
                print_fault(exc)


def _exit_status(code) -> int:
    if code is None: return 0
    if isinstance(code, int): return code
    print(code, file=sys.stderr)
    return 1


def run(fun: Callable[[], int | None], runtime, halt: bool = True) -> int | None:
    """Run `fun`, returning the status the process should exit with.

    A non-zero status returned by `fun` halts straight away, without calling the exit hooks.
    Returns None when `halt` is false and `fun` finished normally: the caller must not exit."""
    try:
        if status := fun():
            return status
        if not halt: return None
        at_exit(runtime, 0)
        return 0
    except SystemExit as exc:
        status = _exit_status(exc.code)
        at_exit(runtime, status)
        return status
    except Exception as exc:
        at_exit(runtime, 1)
        print_fault(exc)
        return 1
