"""Tests for the binary heap."""

import random

import pytest

from gridsteer import EmptyHeap
from gridsteer.model.heap import BinaryHeap


def test_pop_min_matches_sorted_reference():
    rng = random.Random(7)
    for _ in range(20):
        heap = BinaryHeap(indexed=False)
        reference = []
        for _ in range(200):
            if reference and rng.random() < 0.4:
                assert heap.pop_min() == min(reference)
                reference.remove(min(reference))
            else:
                value = rng.randint(-50, 50)
                heap.push(value)
                reference.append(value)
            assert len(heap) == len(reference)
        drained = [heap.pop() for _ in range(len(heap))]
        assert drained == sorted(reference)


class Item:
    def __init__(self, key):
        self.key = key


def by_key(a, b):
    return a.key - b.key


def test_update_after_decrease_key():
    items = [Item(k) for k in (10, 20, 30, 40, 50)]
    heap = BinaryHeap(by_key)
    for item in items:
        heap.push(item)
    items[4].key = 1
    heap.update(items[4])
    assert heap.peek() is items[4]
    items[0].key = 45
    heap.update(items[0])
    assert [heap.pop().key for _ in range(5)] == [1, 20, 30, 40, 45]


def test_contains_and_duplicates():
    heap = BinaryHeap(by_key)
    item = Item(3)
    heap.push(item)
    assert item in heap
    with pytest.raises(ValueError):
        heap.push(item)
    heap.pop()
    assert item not in heap
    assert not heap


def test_empty_heap_errors():
    heap = BinaryHeap()
    with pytest.raises(EmptyHeap):
        heap.pop()
    with pytest.raises(EmptyHeap):
        heap.peek()


def test_update_needs_indexed_heap():
    heap = BinaryHeap(indexed=False)
    heap.push(1)
    with pytest.raises(TypeError):
        heap.update(1)
