from typing import Any, Callable, Iterator, List, Optional

from ..errors import PreconditionError

INITIAL_CAPACITY = 100
GROWTH_FACTOR = 2
RADIX_ALPHABET_SIZE = 256


def _identity(value):
    return value


def _char_code(text: str, position: int) -> int:
    # Positions past the end sort lowest, so "abc" lands before "abcd"
    if position >= len(text):
        return 0
    return ord(text[position])


def _counting_sort(items: List[tuple], position: int) -> List[tuple]:
    """Stable counting sort of (key, element) pairs by the character at `position`."""
    counts = [0] * RADIX_ALPHABET_SIZE
    for key, _ in items:
        counts[_char_code(key, position)] += 1

    for code in range(1, RADIX_ALPHABET_SIZE):
        counts[code] += counts[code - 1]

    output = [None] * len(items)
    for item in reversed(items):
        code = _char_code(item[0], position)
        counts[code] -= 1
        output[counts[code]] = item
    return output


class SortedVector:
    """
    Growable array that tracks whether its elements are currently sorted.

    Elements are compared through `key` (identity by default), so a vector of
    Term objects can be kept in lexicographic order of their words. Binary
    search is only available while the sorted flag is set.
    """

    def __init__(self, capacity: int = INITIAL_CAPACITY, key: Optional[Callable[[Any], Any]] = None):
        self._capacity = max(int(capacity), 1)
        self._elements: List[Any] = [None] * self._capacity
        self._size = 0
        self._sorted = True
        self._key = key or _identity

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        for i in range(self._size):
            yield self._elements[i]

    def __contains__(self, value) -> bool:
        return self.contains(value)

    def __repr__(self) -> str:
        return f"SortedVector(size={self._size}, capacity={self._capacity}, sorted={self._sorted})"

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_sorted(self) -> bool:
        return self._sorted

    def add_unordered(self, value) -> None:
        """Append in O(1) amortized time. Clears the sorted flag."""
        if value is None:
            raise PreconditionError("Cannot add None to a SortedVector")
        self._ensure_capacity()
        self._elements[self._size] = value
        self._size += 1
        self._sorted = False

    def add_ordered(self, value) -> None:
        """
        Insert keeping the vector sorted.

        The insertion point is found by binary search and lands after any
        equal elements, so repeated keys keep their insertion order.
        """
        if value is None:
            raise PreconditionError("Cannot add None to a SortedVector")
        if not self._sorted:
            raise PreconditionError("add_ordered requires a sorted vector (unsorted precondition)")

        key = self._key(value)
        low, high = 0, self._size
        while low < high:
            middle = (low + high) // 2
            if key < self._key(self._elements[middle]):
                high = middle
            else:
                low = middle + 1

        self._ensure_capacity()
        for i in range(self._size, low, -1):
            self._elements[i] = self._elements[i - 1]
        self._elements[low] = value
        self._size += 1

    def radix_sort(self) -> None:
        """
        Sort in place and set the sorted flag.

        String keys go through an LSD radix sort over a 256-code alphabet;
        anything else (or strings with characters outside that alphabet)
        falls back to a comparison sort.
        """
        if self._size <= 1:
            self._sorted = True
            return

        live = self._elements[:self._size]
        keys = [self._key(element) for element in live]

        if all(isinstance(k, str) for k in keys) and \
                all(ord(ch) < RADIX_ALPHABET_SIZE for k in keys for ch in k):
            items = list(zip(keys, live))
            max_length = max(len(k) for k in keys)
            for position in range(max_length - 1, -1, -1):
                items = _counting_sort(items, position)
            self._elements[:self._size] = [element for _, element in items]
        else:
            self._elements[:self._size] = sorted(live, key=self._key)

        self._sorted = True

    def binary_search_index(self, key) -> int:
        """Return the index of an element whose key equals `key`, or -1."""
        if not self._sorted:
            raise PreconditionError("Binary search on an unsorted vector (unsorted precondition)")

        low, high = 0, self._size - 1
        while low <= high:
            middle = low + (high - low) // 2
            current = self._key(self._elements[middle])
            if current == key:
                return middle
            if current < key:
                low = middle + 1
            else:
                high = middle - 1
        return -1

    def binary_search(self, key):
        """Return the element whose key equals `key`, or None when absent."""
        index = self.binary_search_index(key)
        if index == -1:
            return None
        return self._elements[index]

    def contains(self, value) -> bool:
        """Element membership. Use `contains_key` to look up a bare key."""
        if self._sorted:
            return self.binary_search_index(self._key(value)) != -1
        return any(self._elements[i] == value for i in range(self._size))

    def contains_key(self, key) -> bool:
        if self._sorted:
            return self.binary_search_index(key) != -1
        return any(self._key(self._elements[i]) == key for i in range(self._size))

    def __getitem__(self, index: int):
        self._check_index(index)
        return self._elements[index]

    def __setitem__(self, index: int, value) -> None:
        self._check_index(index)
        if value is None:
            raise PreconditionError("Cannot store None in a SortedVector")
        self._elements[index] = value

        if self._sorted:
            key = self._key(value)
            if index > 0 and self._key(self._elements[index - 1]) > key:
                self._sorted = False
            elif index < self._size - 1 and key > self._key(self._elements[index + 1]):
                self._sorted = False

    def clear(self) -> None:
        for i in range(self._size):
            self._elements[i] = None
        self._size = 0
        self._sorted = True

    def to_list(self) -> List[Any]:
        return self._elements[:self._size]

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self._size:
            raise IndexError(f"Index {index} out of range [0, {self._size - 1}]")

    def _ensure_capacity(self) -> None:
        if self._size < self._capacity:
            return
        new_capacity = self._capacity * GROWTH_FACTOR
        new_elements = [None] * new_capacity
        new_elements[:self._size] = self._elements[:self._size]
        self._elements = new_elements
        self._capacity = new_capacity
