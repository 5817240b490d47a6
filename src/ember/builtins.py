## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable

from . import sequences as S
from .errors import EmberRuntimeError, EmberArgumentError
from .formatting import format_item


def get_ember_name(py_name: str) -> str:
    """Map a Python operator name like `op_all_q` to its ember name `all?`."""
    if not py_name.startswith("op_"):
        raise EmberArgumentError(f"Builtin function `{py_name}` requires prefix `op_` by convention.", token=py_name)
    name = py_name[3:]
    if name.endswith('_q'): name = name[:-2] + '?'
    elif name.endswith('_b'): name = name[:-2] + '!'
    return name


## INPUT & OUTPUT
def op_puts(x: Any) -> None:
    print(S.stringify(x))

def op_inspect(x: Any) -> str: return format_item(x)

## LISTS
def op_length(xs: list | str) -> int: return len(xs)

def op_hd(xs: list) -> Any:
    if not xs: raise EmberArgumentError("`hd` of an empty list.", token='hd')
    return xs[0]

def op_tl(xs: list) -> list:
    if not xs: raise EmberArgumentError("`tl` of an empty list.", token='tl')
    return xs[1:]

def op_elem(t: tuple | list, i: int) -> Any: return t[i]
def op_range(first: int, last: int) -> range: return range(first, last + 1)

## SEQUENCES
def op_all_q(xs: Any, fn: Callable = None) -> bool: return S.all_q(xs) if fn is None else S.all_q(xs, fn)
def op_each(xs: Any, fn: Callable) -> Any: return S.each(xs, fn)
def op_foldl(xs: Any, acc: Any, fn: Callable) -> Any: return S.foldl(xs, acc, fn)
def op_join(xs: Any, joiner: str | list = "") -> str | list: return S.join(xs, joiner)
def op_map(xs: Any, fn: Callable) -> list: return S.map(xs, fn)
def op_mapfoldl(xs: Any, acc: Any, fn: Callable) -> tuple: return S.mapfoldl(xs, acc, fn)
def op_filter(xs: Any, fn: Callable) -> list: return S.filter(xs, fn)
def op_filter_map(xs: Any, keep: Callable, fn: Callable) -> list: return S.filter_map(xs, keep, fn)
def op_reverse(xs: Any) -> list: return S.reverse(xs)
def op_uniq(xs: Any) -> list: return S.uniq(xs)
def op_concat(xs: Any) -> list: return S.concat(xs)
def op_count(xs: Any) -> int: return S.count(xs)

## ERRORS
def op_raise(message: Any) -> None:
    raise EmberRuntimeError(S.stringify(message), token='raise')


def load_builtins(runtime) -> dict[str, Callable]:
    builtins = {get_ember_name(k): v for k, v in globals().items() if k.startswith('op_')}

    # Operations that need access to the running system.
    def op_argv() -> list[str]: return list(runtime.argv)
    def op_at_exit(fn: Callable) -> None: runtime.at_exit(fn)
    def op_require(path: str) -> None: runtime.require_file(path)
    def op_doc(module: str, name: str) -> str | None:
        return mod.docs.get(name) if (mod := runtime.find_module(module)) else None

    for fn in (op_argv, op_at_exit, op_require, op_doc):
        builtins[get_ember_name(fn.__name__)] = fn
    return builtins
