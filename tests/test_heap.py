from dataclasses import dataclass
from typing import Optional

import pytest

from parenshell.heap import Handle, Heap, Strategy, Traceable


@dataclass
class Leaf(Traceable):
    text: str

    def trace(self):
        return []


@dataclass
class Branch(Traceable):
    left: Handle
    right: Handle

    def trace(self):
        return [self.left, self.right]


@dataclass
class Cycle(Traceable):
    next: Optional[Handle] = None

    def trace(self):
        return [] if self.next is None else [self.next]


def mutate(heap, tree):
    node = heap.get(tree)
    if isinstance(node, Leaf):
        if node.text == "hello":
            node.text = "goodbye"
    else:
        mutate(heap, node.left)
        mutate(heap, node.right)


def render(heap, tree):
    node = heap.get(tree)
    if isinstance(node, Leaf):
        return node.text
    return render(heap, node.left) + " " + render(heap, node.right)


def test_cycle_collection_terminates():
    heap = Heap(Strategy.AGGRESSIVE)
    cycle = heap.alloc(Cycle())
    heap.get(cycle).next = cycle
    heap.collect()
    assert len(heap) == 0


def test_rooted_cycle_survives():
    heap = Heap(Strategy.AGGRESSIVE)
    cycle = heap.rooted(Cycle())
    heap.get(cycle).next = cycle
    heap.collect()
    assert len(heap) == 1
    assert heap.get(cycle).next == cycle


def test_gc_works():
    heap = Heap(Strategy.AGGRESSIVE)
    hi = heap.alloc(Leaf("hello"))
    heap.root(hi)
    world = heap.alloc(Leaf("world"))
    heap.root(world)
    mark = heap.alloc(Leaf("!"))
    heap.root(mark)
    greeting = heap.alloc(Branch(hi, world))
    heap.root(greeting)
    heap.unroot(hi)
    heap.unroot(world)
    exclamation = heap.alloc(Branch(greeting, mark))
    heap.root(exclamation)
    heap.unroot(greeting)
    heap.unroot(mark)
    heap.collect()

    mutate(heap, exclamation)

    node = heap.get(exclamation)
    assert len(heap) == 5
    assert render(heap, exclamation) == "goodbye world !"
    assert render(heap, node.left) == "goodbye world"
    assert render(heap, node.right) == "!"


def test_unrooted_values_are_freed():
    heap = Heap(Strategy.DISABLED)
    kept = heap.rooted(Leaf("kept"))
    dropped = heap.alloc(Leaf("dropped"))
    heap.collect()
    assert kept in heap
    assert dropped not in heap
    with pytest.raises(KeyError):
        heap.get(dropped)


def test_roots_are_counted():
    heap = Heap(Strategy.DISABLED)
    handle = heap.rooted(Leaf("x"))
    heap.root(handle)
    heap.unroot(handle)
    heap.collect()
    assert heap.get(handle).text == "x"
    heap.unroot(handle)
    assert heap.roots == {}
    heap.collect()
    assert len(heap) == 0


def test_checking_rejects_unrooting_unrooted():
    heap = Heap(Strategy.CHECKING)
    handle = heap.alloc(Leaf("x"))
    with pytest.raises(ValueError):
        heap.unroot(handle)


def test_other_strategies_ignore_extra_unroot():
    heap = Heap(Strategy.DISABLED)
    handle = heap.alloc(Leaf("x"))
    heap.unroot(handle)
    assert heap.roots == {}
    assert len(heap) == 1


def test_handle_from_other_heap_is_rejected():
    first = Heap(Strategy.DISABLED)
    second = Heap(Strategy.DISABLED)
    handle = first.rooted(Leaf("x"))
    with pytest.raises(ValueError):
        second.get(handle)


def test_default_strategy_collects_when_full():
    heap = Heap(Strategy.DEFAULT)
    first = heap.alloc(Leaf("a"))
    second = heap.alloc(Leaf("b"))
    assert first not in heap
    assert second in heap


def test_disabled_strategy_never_collects_by_itself():
    heap = Heap(Strategy.DISABLED)
    handles = [heap.alloc(Leaf(str(n))) for n in range(10)]
    assert len(heap) == 10
    assert all(h in heap for h in handles)


def test_plain_values_have_no_children():
    heap = Heap(Strategy.AGGRESSIVE)
    handle = heap.rooted("plain string")
    heap.collect()
    assert heap.get(handle) == "plain string"