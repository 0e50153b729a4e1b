from typing import Any, Callable, Iterable, Iterator, List, Optional

# Node slots live in parallel arrays; links are slot indices
EMPTY = -1


class CircularDoublyLinkedList:
    """
    Circular doubly-linked list backed by an arena of node slots.

    With n > 0 elements, following `next` n times from the root returns to
    the root and `prev` is its exact mirror. Removed slots are recycled.
    """

    def __init__(self, items: Optional[Iterable[Any]] = None):
        self._values: List[Any] = []
        self._next: List[int] = []
        self._prev: List[int] = []
        self._free: List[int] = []
        self._root = EMPTY
        self._count = 0

        if items is not None:
            for item in items:
                self.add(item)

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Any]:
        iterator = ListIterator(self)
        while iterator.advance():
            yield iterator.current

    def __reversed__(self) -> Iterator[Any]:
        if self._root == EMPTY:
            return
        node = self._prev[self._root]
        for _ in range(self._count):
            yield self._values[node]
            node = self._prev[node]

    def __contains__(self, value) -> bool:
        return self.exists(value)

    def __repr__(self) -> str:
        return "[" + " <-> ".join(repr(value) for value in self) + "]"

    @property
    def first(self):
        """Payload of the root node, or None when the list is empty."""
        if self._root == EMPTY:
            return None
        return self._values[self._root]

    def add(self, value) -> None:
        """Append after the current last node in O(1)."""
        node = self._allocate(value)
        if self._root == EMPTY:
            self._root = node
        else:
            last = self._prev[self._root]
            self._next[last] = node
            self._prev[node] = last
            self._next[node] = self._root
            self._prev[self._root] = node
        self._count += 1

    def remove(self, value) -> bool:
        """Unlink the first node equal to `value`. Returns False if absent."""
        node = self._find(value)
        if node == EMPTY:
            return False

        if self._count == 1:
            self._root = EMPTY
        else:
            previous, following = self._prev[node], self._next[node]
            self._next[previous] = following
            self._prev[following] = previous
            if node == self._root:
                self._root = following

        self._release(node)
        self._count -= 1
        return True

    def exists(self, value) -> bool:
        return self._find(value) != EMPTY

    def clear(self) -> None:
        self._values.clear()
        self._next.clear()
        self._prev.clear()
        self._free.clear()
        self._root = EMPTY
        self._count = 0

    def to_list(self) -> List[Any]:
        return list(self)

    def sort_descending(self, key: Callable[[Any], float]) -> None:
        """
        Bubble sort by `key`, largest first, swapping node payloads.

        Only strictly smaller neighbours are swapped, so equal keys keep
        their relative order. Worst case O(n^2).
        """
        if self._count < 2:
            return

        swapped = True
        while swapped:
            swapped = False
            node = self._root
            for _ in range(self._count - 1):
                following = self._next[node]
                if key(self._values[node]) < key(self._values[following]):
                    self._values[node], self._values[following] = \
                        self._values[following], self._values[node]
                    swapped = True
                node = following

    def _find(self, value) -> int:
        node = self._root
        for _ in range(self._count):
            if self._values[node] == value:
                return node
            node = self._next[node]
        return EMPTY

    def _allocate(self, value) -> int:
        if self._free:
            node = self._free.pop()
            self._values[node] = value
        else:
            node = len(self._values)
            self._values.append(value)
            self._next.append(node)
            self._prev.append(node)
        self._next[node] = node
        self._prev[node] = node
        return node

    def _release(self, node: int) -> None:
        self._values[node] = None
        self._next[node] = node
        self._prev[node] = node
        self._free.append(node)


class ListIterator:
    """
    External cursor over a CircularDoublyLinkedList.

    `advance()` moves to the next element and returns False once `len(list)`
    elements have been yielded. Structural changes during traversal are not
    supported.
    """

    def __init__(self, linked_list: CircularDoublyLinkedList):
        self._list = linked_list
        self._node = EMPTY
        self._first = True
        self._position = -1
        self.current = None

    def advance(self) -> bool:
        linked_list = self._list
        if linked_list._count == 0:
            return False

        if self._first:
            self._node = linked_list._root
            self._first = False
            self._position = 0
        else:
            self._position += 1
            if self._position >= linked_list._count:
                return False
            self._node = linked_list._next[self._node]

        self.current = linked_list._values[self._node]
        return True

    def reset(self) -> None:
        self._node = EMPTY
        self._first = True
        self._position = -1
        self.current = None
