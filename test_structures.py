from itertools import permutations

import pytest

from ZipfRetriever.errors import PreconditionError
from ZipfRetriever.structures import CircularDoublyLinkedList, ListIterator, SortedVector


class TestSortedVector:
    def test_add_ordered_keeps_order(self):
        vector = SortedVector()
        inserted = []
        for value in [5, 1, 3, 3, 2, 0, 4]:
            vector.add_ordered(value)
            inserted.append(value)

            assert vector.is_sorted
            assert vector.to_list() == sorted(inserted)

    def test_add_ordered_places_equal_keys_after_existing(self):
        vector = SortedVector(key=lambda pair: pair[0])
        vector.add_ordered((1, "first"))
        vector.add_ordered((0, "zero"))
        vector.add_ordered((1, "second"))

        assert [label for _, label in vector] == ["zero", "first", "second"]

    def test_add_ordered_on_unsorted_vector_raises(self):
        vector = SortedVector()
        vector.add_unordered(2)
        vector.add_unordered(1)

        with pytest.raises(PreconditionError):
            vector.add_ordered(3)

    def test_add_unordered_clears_sorted_flag(self):
        vector = SortedVector()
        assert vector.is_sorted

        vector.add_unordered("perro")
        assert not vector.is_sorted

    def test_none_is_rejected(self):
        vector = SortedVector()
        with pytest.raises(PreconditionError):
            vector.add_unordered(None)
        with pytest.raises(PreconditionError):
            vector.add_ordered(None)

    def test_radix_sort_matches_reference_sort(self):
        words = ["perro", "gato", "pajaro", "gat", "a", "zeta", "gato", "árbol", "ñandú", "nube"]
        vector = SortedVector()
        for word in words:
            vector.add_unordered(word)

        vector.radix_sort()

        assert vector.to_list() == sorted(words)
        assert vector.is_sorted

    def test_radix_sort_prefix_sorts_first(self):
        vector = SortedVector()
        for word in ["abcd", "abc", "ab"]:
            vector.add_unordered(word)

        vector.radix_sort()

        assert vector.to_list() == ["ab", "abc", "abcd"]

    @pytest.mark.parametrize("words", permutations(["b", "ab", "a", "abc", "ba", "b"]))
    def test_radix_sort_any_permutation(self, words):
        vector = SortedVector()
        for word in words:
            vector.add_unordered(word)

        vector.radix_sort()

        assert vector.to_list() == ["a", "ab", "abc", "b", "b", "ba"]

    def test_radix_sort_mixed_lengths(self):
        vector = SortedVector()
        for word in ["b", "ab", "a", "abc"]:
            vector.add_unordered(word)

        vector.radix_sort()

        assert vector.to_list() == ["a", "ab", "abc", "b"]

    def test_radix_sort_falls_back_for_wide_characters(self):
        words = ["ŝipo", "abc", "ĉevalo"]
        vector = SortedVector()
        for word in words:
            vector.add_unordered(word)

        vector.radix_sort()

        assert vector.to_list() == sorted(words)

    def test_radix_sort_non_string_keys(self):
        vector = SortedVector()
        for value in [3, 1, 2]:
            vector.add_unordered(value)

        vector.radix_sort()

        assert vector.to_list() == [1, 2, 3]

    def test_radix_sort_with_key(self):
        vector = SortedVector(key=lambda pair: pair[1])
        for pair in [(1, "c"), (2, "a"), (3, "b")]:
            vector.add_unordered(pair)

        vector.radix_sort()

        assert [number for number, _ in vector] == [2, 3, 1]

    def test_binary_search_hits_and_misses(self):
        vector = SortedVector()
        for word in ["gato", "pajaro", "perro"]:
            vector.add_ordered(word)

        assert vector.binary_search_index("pajaro") == 1
        assert vector.binary_search("perro") == "perro"
        assert vector.binary_search_index("raton") == -1
        assert vector.binary_search("raton") is None

    def test_binary_search_on_empty_vector(self):
        assert SortedVector().binary_search_index("gato") == -1

    def test_binary_search_requires_sorted_vector(self):
        vector = SortedVector()
        vector.add_unordered("b")
        vector.add_unordered("a")

        with pytest.raises(PreconditionError):
            vector.binary_search("a")

    def test_contains_sorted_and_unsorted(self):
        vector = SortedVector()
        vector.add_unordered("b")
        vector.add_unordered("a")
        assert "a" in vector
        assert "z" not in vector

        vector.radix_sort()
        assert "a" in vector
        assert "z" not in vector

    def test_contains_key_on_keyed_vector(self):
        vector = SortedVector(key=lambda pair: pair[0])
        vector.add_unordered(("perro", 2))
        vector.add_unordered(("gato", 1))

        assert vector.contains_key("gato")
        assert not vector.contains_key("raton")
        assert ("gato", 1) in vector

        vector.radix_sort()
        assert vector.contains_key("gato")
        assert not vector.contains_key("raton")
        assert ("perro", 2) in vector

    def test_setitem_revalidates_neighbours(self):
        vector = SortedVector()
        for value in [1, 2, 3]:
            vector.add_ordered(value)

        vector[1] = 2
        assert vector.is_sorted

        vector[0] = 5
        assert not vector.is_sorted

    def test_setitem_at_end_breaking_order(self):
        vector = SortedVector()
        for value in [1, 2, 3]:
            vector.add_ordered(value)

        vector[2] = 0
        assert not vector.is_sorted

    def test_index_out_of_range(self):
        vector = SortedVector()
        vector.add_ordered(1)

        with pytest.raises(IndexError):
            vector[1]
        with pytest.raises(IndexError):
            vector[-1] = 4

    def test_capacity_doubles_and_survives_clear(self):
        vector = SortedVector(capacity=2)
        for value in [1, 2, 3]:
            vector.add_unordered(value)

        assert vector.capacity == 4
        assert len(vector) == 3

        vector.clear()
        assert len(vector) == 0
        assert vector.capacity == 4
        assert vector.is_sorted


class TestCircularDoublyLinkedList:
    def test_add_and_iterate_in_insertion_order(self):
        items = CircularDoublyLinkedList(["a", "b", "c"])

        assert list(items) == ["a", "b", "c"]
        assert list(reversed(items)) == ["c", "b", "a"]
        assert len(items) == 3
        assert items.first == "a"

    def test_links_are_circular(self):
        items = CircularDoublyLinkedList([1, 2, 3, 4])

        node = items._root
        for _ in range(len(items)):
            node = items._next[node]
        assert node == items._root

        node = items._root
        for _ in range(len(items)):
            assert items._next[items._prev[node]] == node
            node = items._next[node]

    def test_remove_root_moves_root_to_successor(self):
        items = CircularDoublyLinkedList([1, 2, 3])

        assert items.remove(1)
        assert items.first == 2
        assert items.to_list() == [2, 3]

    def test_remove_middle_and_missing(self):
        items = CircularDoublyLinkedList([1, 2, 3])

        assert items.remove(2)
        assert items.to_list() == [1, 3]
        assert not items.remove(42)
        assert len(items) == 2

    def test_remove_last_element_empties_list(self):
        items = CircularDoublyLinkedList(["solo"])

        assert items.remove("solo")
        assert len(items) == 0
        assert items.first is None
        assert items.to_list() == []

    def test_removed_slots_are_reused(self):
        items = CircularDoublyLinkedList([1, 2, 3])
        slots = len(items._values)

        items.remove(2)
        items.add(4)

        assert len(items._values) == slots
        assert items.to_list() == [1, 3, 4]

    def test_exists_and_contains(self):
        items = CircularDoublyLinkedList(["gato"])

        assert items.exists("gato")
        assert "gato" in items
        assert "perro" not in items

    def test_clear(self):
        items = CircularDoublyLinkedList([1, 2])
        items.clear()

        assert len(items) == 0
        assert list(items) == []

    def test_sort_descending_is_stable(self):
        items = CircularDoublyLinkedList([("a", 1), ("b", 3), ("c", 1), ("d", 3), ("e", 2)])

        items.sort_descending(lambda item: item[1])

        assert [name for name, _ in items] == ["b", "d", "e", "a", "c"]

    def test_sort_descending_on_short_lists(self):
        empty = CircularDoublyLinkedList()
        empty.sort_descending(lambda item: item)
        assert empty.to_list() == []

        single = CircularDoublyLinkedList([7])
        single.sort_descending(lambda item: item)
        assert single.to_list() == [7]

    def test_repr(self):
        assert repr(CircularDoublyLinkedList(["a", "b"])) == "['a' <-> 'b']"


class TestListIterator:
    def test_yields_each_element_once(self):
        items = CircularDoublyLinkedList([10, 20, 30])
        iterator = ListIterator(items)

        seen = []
        while iterator.advance():
            seen.append(iterator.current)

        assert seen == [10, 20, 30]
        assert not iterator.advance()

    def test_empty_list(self):
        iterator = ListIterator(CircularDoublyLinkedList())
        assert not iterator.advance()

    def test_reset_restarts_traversal(self):
        items = CircularDoublyLinkedList(["x", "y"])
        iterator = ListIterator(items)
        while iterator.advance():
            pass

        iterator.reset()
        assert iterator.advance()
        assert iterator.current == "x"
