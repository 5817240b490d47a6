## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Pull-based iteration: a container hands out an iterator state, which is either a
# `Cell(head, resume)` or the `STOP` sentinel. Calling `resume()` yields the next state.
#

from typing import Any, Callable
from functools import singledispatch
from collections import namedtuple

from .errors import EmberProtocolError


class Cell(namedtuple('Cell', ['head', 'resume'])):
    __slots__ = ()

    def __repr__(self):
        return f"<cell {self.head!r} …>"

    def __bool__(self):
        raise TypeError("Iterator state truth value is ambiguous; compare with `is STOP` or `is not STOP`.")


class _Stop:
    __slots__ = ()
    _singleton = None

    def __new__(cls):
        if cls._singleton is None:
            cls._singleton = super().__new__(cls)
        return cls._singleton

    def __repr__(self):
        return "<stop>"

    def __reduce__(self):
        return (_Stop, ())


# All checks for exhaustion must be done by identity with this.
STOP = _Stop()

State = Cell | _Stop


@singledispatch
def iterator(container) -> State:
    """Produce the iterator state for `container`; types opt in via `register` or `__iterator__`."""
    if (method := getattr(type(container), '__iterator__', None)) is not None:
        return method(container)
    raise EmberProtocolError(container)


def _iterate_sequence(items: tuple, index: int = 0) -> State:
    if index >= len(items): return STOP
    return Cell(items[index], lambda: _iterate_sequence(items, index + 1))


@iterator.register(list)
@iterator.register(tuple)
def _(container) -> State:
    return _iterate_sequence(tuple(container))


@iterator.register(dict)
def _(container) -> State:
    return _iterate_sequence(tuple(container.items()))


@iterator.register(set)
@iterator.register(frozenset)
def _(container) -> State:
    return _iterate_sequence(tuple(container))


@iterator.register(range)
def _(container) -> State:
    def _step(index):
        return (container[index], index + 1) if index < len(container) else None
    return unfold(0, _step)


# States are iterable themselves, which lets engines consume explicit lazy streams.
@iterator.register(Cell)
@iterator.register(_Stop)
def _(state) -> State:
    return state


def unfold(seed: Any, step: Callable[[Any], tuple | None]) -> State:
    """Build a lazy stream: `step(seed)` returns `(value, next_seed)`, or None when done."""
    if (pair := step(seed)) is None: return STOP
    value, next_seed = pair
    return Cell(value, lambda: unfold(next_seed, step))


def states(state: State):
    """Walk an iterator state to its end without recursion, yielding each head."""
    while state is not STOP:
        head, resume = state
        yield head
        state = resume()
