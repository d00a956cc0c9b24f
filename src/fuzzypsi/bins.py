"""
.. module:: bins

bins module
===========

This module exports functions for quantizing coordinates into bins under the
d∞ metric. A coordinate ``v`` is assigned to the bin ``floor(v / (2 * delta))``,
so any two coordinates that are within ``delta`` of one another always land
either in the same bin or in adjacent bins.

Coordinates are non-negative integers. Points with several coordinates are
not binned directly: a caller quantizes the one coordinate that is compared
under the distance threshold and carries any other coordinate unchanged.
For example, points ``(x, y)`` matched on ``y`` alone can be binned as
follows.

>>> [(x, bin(y, 2)) for (x, y) in [(1, 8), (1, 9), (2, 13)]]
[(1, 2), (1, 2), (2, 3)]

>>> bin(8, 2)
2
>>> sorted(create_bins([8, 12], 2))
[1, 2, 3]
>>> invert_bin(2, [8, 9, 12], 2)
[8, 9]
"""
from __future__ import annotations
from typing import Iterable, List, Set
import doctest

def _check(delta: int):
    if not isinstance(delta, int) or delta <= 0:
        raise ValueError('distance threshold must be a positive integer')

def _coordinate(v: int) -> int:
    if not isinstance(v, int) or v < 0:
        raise ValueError('coordinate must be a non-negative integer')
    return v

def bin(v: int, delta: int) -> int: # pylint: disable=redefined-builtin
    """
    Return the bin of a coordinate for the supplied distance threshold.

    >>> bin(8, 2) == bin(9, 2)
    True
    >>> bin(12, 2)
    3
    >>> bin(-1, 2)
    Traceback (most recent call last):
      ...
    ValueError: coordinate must be a non-negative integer
    >>> bin(1, 0)
    Traceback (most recent call last):
      ...
    ValueError: distance threshold must be a positive integer
    """
    _check(delta)
    return _coordinate(v) // (2 * delta)

def create_bins(points: Iterable[int], delta: int) -> Set[int]:
    """
    Return the set of every bin that can contain a coordinate within
    ``delta`` of one of the supplied points. For each point ``v``, this is
    the union of the bins of all coordinates in the window
    ``[max(0, v - delta), v + delta]``.

    Because the two parties of the protocol bin their own (generally
    different) coordinates, each party must cover every bin that one of
    its points could share with a coordinate up to ``delta`` away.

    >>> sorted(create_bins([1], 2))
    [0]
    >>> sorted(create_bins([10, 100], 2))
    [2, 3, 24, 25]
    >>> create_bins([], 2)
    set()
    """
    _check(delta)
    bins = set()
    for v in points:
        v = _coordinate(v)
        lower = bin(max(0, v - delta), delta)
        upper = bin(v + delta, delta)
        bins.update(range(lower, upper + 1))
    return bins

def invert_bin(b: int, points: Iterable[int], delta: int) -> List[int]:
    """
    Return every point (in the order supplied) whose own bin is the supplied
    bin. The result is empty if no point belongs to the bin.

    >>> invert_bin(3, [8, 10, 12], 2)
    [12]
    >>> invert_bin(24, [100], 2)
    []
    """
    _check(delta)
    return [v for v in points if bin(v, delta) == b]

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
