"""Array-backed binary min-heap ordered by a comparator."""

from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from ..errors import EmptyHeap

T = TypeVar('T')
Comparator = Callable[[T, T], float]


def default_compare(a, b) -> float:
    return (a > b) - (a < b)


class BinaryHeap(Generic[T]):
    """
    Min-heap over a comparator `(a, b) -> order` (negative when a < b).

    With `indexed=True` every item's slot is tracked in a map so that
    `update` can restore the heap property after the item's key decreased
    without a linear scan. Indexed items must be hashable and unique, which
    is how the pathfinders use it for grid nodes. Plain value queues can
    pass `indexed=False` and may then hold duplicates.
    """

    def __init__(self, comparator: Comparator = default_compare,
                 indexed: bool = True):
        self.comparator = comparator
        self._items: List[T] = []
        self._index: Optional[Dict[T, int]] = {} if indexed else None

    def push(self, item: T) -> None:
        if self._index is not None and item in self._index:
            raise ValueError(f"{item!r} is already in the heap")
        self._items.append(item)
        self._sift_up(len(self._items) - 1)

    def pop(self) -> T:
        """Remove and return the minimum item."""
        items = self._items
        if not items:
            raise EmptyHeap("pop from an empty heap")
        root = items[0]
        last = items.pop()
        if self._index is not None:
            del self._index[root]
        if items:
            self._place(last, 0)
            self._sift_down(0)
        return root

    pop_min = pop

    def peek(self) -> T:
        if not self._items:
            raise EmptyHeap("peek into an empty heap")
        return self._items[0]

    def update(self, item: T) -> None:
        """Re-position `item` after its key changed."""
        if self._index is None:
            raise TypeError("update() needs an indexed heap")
        self._sift_up(self._index[item])
        self._sift_down(self._index[item])

    def size(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        self._items.clear()
        if self._index is not None:
            self._index.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __contains__(self, item) -> bool:
        if self._index is not None:
            return item in self._index
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        """Iterate in storage order, not sorted order."""
        return iter(list(self._items))

    def _place(self, item: T, pos: int) -> None:
        self._items[pos] = item
        if self._index is not None:
            self._index[item] = pos

    def _sift_up(self, pos: int) -> None:
        items = self._items
        compare = self.comparator
        item = items[pos]
        while pos > 0:
            parent_pos = (pos - 1) >> 1
            parent = items[parent_pos]
            if compare(item, parent) >= 0:
                break
            self._place(parent, pos)
            pos = parent_pos
        self._place(item, pos)

    def _sift_down(self, pos: int) -> None:
        items = self._items
        compare = self.comparator
        size = len(items)
        item = items[pos]
        while True:
            child = 2 * pos + 1
            if child >= size:
                break
            right = child + 1
            if right < size and compare(items[right], items[child]) < 0:
                child = right
            if compare(items[child], item) >= 0:
                break
            self._place(items[child], pos)
            pos = child
        self._place(item, pos)
