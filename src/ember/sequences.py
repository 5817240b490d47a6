## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Generic algorithms over any container implementing the iterator protocol. Each one pulls
# a single state at a time; none of them recurse, so input size never grows the stack.
#

from typing import Any, Callable

from .iterators import STOP, iterator, states


def _identity(x): return x


def _truthy(x) -> bool:
    # Only `false` and `nil` are falsy, all other values (0, "", []) count as true.
    return x is not False and x is not None


def stringify(x) -> str:
    if isinstance(x, str): return x
    if isinstance(x, bytes): return x.decode('utf-8')
    if isinstance(x, bool): return str(x).lower()
    if x is None: return 'nil'
    if _is_char_list(x): return ''.join(x)
    return str(x)


def _is_char_list(x) -> bool:
    return isinstance(x, list) and all(isinstance(c, str) and len(c) == 1 for c in x)


## PREDICATES & TRAVERSAL
def all_q(container, fun: Callable[[Any], Any] = _identity) -> bool:
    """Check that `fun` holds for every item, stopping at the first `false` or `nil`.

        all_q([2, 4, 6], lambda x: x % 2 == 0)  #=> True
        all_q([1, None, 3])                     #=> False
    """
    state = iterator(container)
    while state is not STOP:
        head, resume = state
        if not _truthy(fun(head)): return False
        state = resume()
    return True


def each(container, fun: Callable[[Any], Any]):
    """Invoke `fun` on each item from left to right. Returns `container` itself."""
    for item in states(iterator(container)):
        fun(item)
    return container


def count(container) -> int:
    return foldl(container, 0, lambda _, acc: acc + 1)


## FOLDS
def foldl(container, acc, fun: Callable[[Any, Any], Any]):
    """Iterate from left to right passing an accumulator to `fun(item, acc)`.

        foldl([1, 2, 3], 0, lambda x, acc: x + acc)  #=> 6
    """
    state = iterator(container)
    while state is not STOP:
        head, resume = state
        acc = fun(head, acc)
        state = resume()
    return acc


def mapfoldl(container, acc, fun: Callable[[Any, Any], tuple]) -> tuple[list, Any]:
    """Map and fold at once; `fun(item, acc)` returns `(mapped, acc)`.

        mapfoldl([1, 2, 3], 0, lambda x, acc: (x * 2, x + acc))  #=> ([2, 4, 6], 6)
    """
    result = []
    for item in states(iterator(container)):
        mapped, acc = fun(item, acc)
        result.append(mapped)
    return result, acc


## TRANSFORMS
def map(container, fun: Callable[[Any], Any]) -> list:
    """Return a new list with `fun` applied to each item, in order."""
    return [fun(item) for item in states(iterator(container))]


def filter(container, fun: Callable[[Any], Any]) -> list:
    return [item for item in states(iterator(container)) if _truthy(fun(item))]


def filter_map(container, keep: Callable[[Any], Any], fun: Callable[[Any], Any]) -> list:
    return [fun(item) for item in states(iterator(container)) if _truthy(keep(item))]


def reverse(container) -> list:
    result = map(container, _identity)
    result.reverse()
    return result


def uniq(container) -> list:
    """Drop repeated items, keeping the first occurrence of each."""
    seen, result = set(), []
    for item in states(iterator(container)):
        key = _hashable(item)
        if key in seen: continue
        seen.add(key)
        result.append(item)
    return result


def _hashable(item):
    if isinstance(item, list): return tuple(_hashable(x) for x in item)
    if isinstance(item, dict): return tuple((k, _hashable(v)) for k, v in item.items())
    return item


def concat(container) -> list:
    """Flatten one level: a container of containers becomes a single list."""
    result = []
    for inner in states(iterator(container)):
        result.extend(states(iterator(inner)))
    return result


## STRINGS
def join(container, joiner: str | list = ""):
    """Join the string form of each item with `joiner`; the result has the joiner's type.

        join([1, 2, 3], " = ")         #=> "1 = 2 = 3"
        join([1, 2, 3], list(" = "))   #=> ['1', ' ', '=', ' ', '2', ...]
    """
    if isinstance(joiner, list):
        return list(join(container, stringify(joiner)))

    state = iterator(container)
    if state is STOP: return ""
    head, resume = state
    parts = [stringify(head)]
    state = resume()
    while state is not STOP:
        head, resume = state
        parts.append(joiner)
        parts.append(stringify(head))
        state = resume()
    return ''.join(parts)
