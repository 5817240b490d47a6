## ember — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from ember.errors import EmberProtocolError
from ember.iterators import Cell, STOP, iterator, states, unfold


def test_empty_list_is_stop():
    assert iterator([]) is STOP


def test_list_yields_cells_in_order():
    state = iterator([1, 2])
    assert isinstance(state, Cell)
    assert state.head == 1
    state = state.resume()
    assert state.head == 2
    assert state.resume() is STOP


def test_iterator_is_not_shared_between_calls():
    items = [1, 2, 3]
    first = iterator(items)
    first.resume()
    # A fresh traversal starts at the beginning again.
    assert iterator(items).head == 1


def test_snapshot_ignores_later_mutation():
    items = [1, 2]
    state = iterator(items)
    items.append(3)
    assert list(states(state)) == [1, 2]


def test_range_dict_set_and_tuple():
    assert list(states(iterator(range(3)))) == [0, 1, 2]
    assert list(states(iterator({'a': 1, 'b': 2}))) == [('a', 1), ('b', 2)]
    assert sorted(states(iterator({3, 1, 2}))) == [1, 2, 3]
    assert list(states(iterator((4, 5)))) == [4, 5]


def test_state_passes_through_iterator():
    state = iterator([1])
    assert iterator(state) is state
    assert iterator(STOP) is STOP


def test_unfold_builds_lazy_stream():
    calls = []
    def step(n):
        calls.append(n)
        return (n * n, n + 1) if n < 4 else None

    state = unfold(1, step)
    assert calls == [1]
    assert list(states(state)) == [1, 4, 9]


def test_custom_container_with_iterator_method():
    class Countdown:
        def __init__(self, n): self.n = n
        def __iterator__(self):
            return unfold(self.n, lambda k: (k, k - 1) if k > 0 else None)

    assert list(states(iterator(Countdown(3)))) == [3, 2, 1]


def test_register_new_container_type():
    class Pair:
        def __init__(self, a, b): self.a, self.b = a, b

    @iterator.register(Pair)
    def _(pair):
        return iterator([pair.a, pair.b])

    assert list(states(iterator(Pair('x', 'y')))) == ['x', 'y']


def test_unknown_container_raises_type_error():
    with pytest.raises(EmberProtocolError) as info:
        iterator(42)
    assert isinstance(info.value, TypeError)
    assert "int" in str(info.value)


def test_state_truth_value_is_ambiguous():
    with pytest.raises(TypeError):
        bool(iterator([1]))


def test_states_walks_long_sequences_without_recursion():
    assert sum(states(iterator(list(range(50_000))))) == sum(range(50_000))
