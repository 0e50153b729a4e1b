"""
Container types used by the index: a sorted growable vector with radix sort
and binary search, and a circular doubly-linked list.
"""
from .sorted_vector import SortedVector
from .circular_list import CircularDoublyLinkedList, ListIterator
