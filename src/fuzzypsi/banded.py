"""
.. module:: banded

banded module
=============

This module exports the class :obj:`~fuzzypsi.banded.banded`, an OKVS
strategy based on random band matrices (RB-OKVS), together with the class
:obj:`~fuzzypsi.banded.configuration` that determines the dimensions of the
system it solves.

Each key determines one row of a binary matrix with ``columns`` columns:
a start offset and a band of ``band_width`` bits, both derived by hashing
(see :obj:`~fuzzypsi.hashing`). Encoding solves the linear system over
GF(2) in which each row must reproduce the value of its key as the XOR of
the encoding entries selected by its band. Decoding recomputes the row of a
key and returns that XOR.

>>> s = banded(100)
>>> pairs = [(i, i * i) for i in range(1, 51)]
>>> e = s.encode(pairs)
>>> len(e) == s.configuration.columns
True
>>> all(s.decode(e, k).to_int() == v for (k, v) in pairs)
True

Because the rows are sorted by start offset before elimination, each
elimination step touches only the rows whose bands overlap the pivot column,
so the cost of encoding grows almost linearly with the number of pairs.

Decoding a key that was not encoded yields an XOR of encoding entries. When
the encoded collection is padded (up to the capacity of the instance) with
pairs having uniformly random keys and values, such a result cannot be
distinguished from the value of an encoded key. Padding is the caller's
responsibility.
"""
from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Tuple, Union
from dataclasses import dataclass
from fractions import Fraction
import doctest
import logging
import math
from fuzzypsi.band import band
from fuzzypsi.hashing import hash_index, hash_band, SALT_LENGTH
from fuzzypsi.okvs import okvs, value, encoding, LENGTH, ZeroRowError

logger = logging.getLogger(__name__)

EPSILON = 0.1
"""
Default fractional overhead of the number of columns over the capacity.
Smaller values yield shorter encodings; larger values yield faster encoding
and a lower probability of failure.
"""

BAND_WIDTH = 128
"""Default maximum band width."""

BAND_WIDTH_MINIMUM = 8

@dataclass(frozen=True)
class configuration:
    """
    Dimensions of the system solved by the banded strategy. Both parties
    must derive identical instances (from the same capacity, overhead, and
    band width limit) in order to interoperate.

    >>> configuration.for_capacity(100)
    configuration(columns=110, band_width=88)
    >>> configuration.for_capacity(1000)
    configuration(columns=1100, band_width=128)
    >>> configuration.for_capacity(5)
    configuration(columns=6, band_width=5)
    """
    columns: int
    band_width: int

    @classmethod
    def for_capacity(
            cls,
            capacity: int,
            epsilon: float = EPSILON,
            limit: int = BAND_WIDTH
        ) -> configuration:
        """
        Derive a configuration from an expected number of pairs. The number
        of columns is ``ceil((1 + epsilon) * capacity)`` and the band width is
        ``min(limit, max(8, floor(0.8 * columns)))``, reduced further if
        necessary so that it is less than the number of columns.

        >>> configuration.for_capacity(1, 0)
        Traceback (most recent call last):
          ...
        ValueError: configuration requires at least two columns
        """
        if epsilon < 0:
            raise ValueError('overhead must be non-negative')
        if limit <= 0:
            raise ValueError('band width limit must be a positive integer')

        columns = math.ceil((1 + Fraction(epsilon).limit_denominator()) * capacity)
        if columns < 2:
            raise ValueError('configuration requires at least two columns')

        band_width = min(limit, max(BAND_WIDTH_MINIMUM, (columns * 4) // 5))
        return cls(columns, min(band_width, columns - 1))

    @property
    def starts(self: configuration) -> int:
        """
        Number of distinct start offsets a row can have.
        """
        return self.columns - self.band_width

def _radix_sort(rows: List[tuple], maximum: int) -> List[tuple]:
    """
    Stable least-significant-digit radix sort (base 256) of rows by their
    first component, which must be in the range ``[0, maximum]``.

    >>> _radix_sort([(300, 'a'), (2, 'b'), (300, 'c'), (1, 'd')], 300)
    [(1, 'd'), (2, 'b'), (300, 'a'), (300, 'c')]
    """
    shift = 0
    while maximum >> shift:
        buckets = [[] for _ in range(256)]
        for row in rows:
            buckets[(row[0] >> shift) & 255].append(row)
        rows = [row for bucket in buckets for row in bucket]
        shift += 8
    return rows

def _solve(rows: List[Tuple[int, band, int]], columns: int) -> List[int]:
    """
    Solve the banded system whose rows (sorted by start offset) are
    ``(start, band, y)`` triples, returning a solution vector of the
    supplied length.

    >>> rows = [(0, band(2, 0b11), 3), (0, band(2, 0b01), 1)]
    >>> _solve(rows, 3)
    [1, 2, 0]
    >>> _solve([(0, band(2, 0b01), 1), (0, band(2, 0b01), 2)], 3)
    Traceback (most recent call last):
      ...
    fuzzypsi.okvs.ZeroRowError: row 1 has no pivot
    """
    starts = [start for (start, _, _) in rows]
    bands = [b for (_, b, _) in rows]
    ys = [y for (_, _, y) in rows]
    pivots = [0] * len(rows)

    # Forward elimination; later rows see the eliminated state of earlier ones.
    for i in range(len(rows)):
        first_one = bands[i].trailing_zeros()
        if first_one == bands[i].width:
            raise ZeroRowError(i)

        pivot = starts[i] + first_one
        pivots[i] = pivot

        for k in range(i + 1, len(rows)):
            if starts[k] > pivot:
                break
            if bands[k].bit(pivot - starts[k]):
                bands[k] = bands[k] ^ (bands[i] >> (starts[k] - starts[i]))
                ys[k] ^= ys[i]

    # Back substitution; each pivot depends only on columns fixed by later rows.
    solution = [0] * columns
    for i in reversed(range(len(rows))):
        solution[pivots[i]] = ys[i] ^ bands[i].dot(solution, starts[i])

    return solution

class banded(okvs):
    """
    OKVS strategy based on random band matrices. The optional salt selects
    the hash functions used to derive rows; a failed encoding attempt (see
    :obj:`~fuzzypsi.okvs.ZeroRowError`) can be retried with a fresh salt. A
    salt can be at most :obj:`~fuzzypsi.hashing.SALT_LENGTH` bytes long.

    >>> s = banded(64)
    >>> s.configuration
    configuration(columns=71, band_width=56)
    >>> e = s.encode({1: 2, 3: 4})
    >>> s.decode(e, 3).to_int()
    4
    """
    def __init__(
            self: banded,
            capacity: int,
            length: int = LENGTH,
            epsilon: float = EPSILON,
            limit: int = BAND_WIDTH,
            salt: bytes = b''
        ):
        super().__init__(capacity, length)
        if len(salt) > SALT_LENGTH:
            raise ValueError('salt must be at most ' + str(SALT_LENGTH) + ' bytes')

        self.configuration = configuration.for_capacity(capacity, epsilon, limit)
        self.salt = bytes(salt)

    def row(self: banded, k: Union[bytes, int]) -> Tuple[int, band]:
        """
        Return the start offset and band of the row for the supplied key.
        This is a pure function of the key and the configuration, so rows
        for many keys can be derived independently.

        >>> (start, b) = banded(100).row(42)
        >>> 0 <= start < 110 - 88, len(b), b.bit(0)
        (True, 88, True)
        """
        k = self._key(k)
        return (
            hash_index(k, self.configuration.starts, self.salt),
            hash_band(k, self.configuration.band_width, self.salt)
        )

    def encode(
            self: banded,
            pairs: Union[Iterable[Tuple[Any, Any]], Mapping[Any, Any]]
        ) -> encoding:
        """
        Return the encoding of the supplied pairs.

        >>> banded(10).encode([(i, i) for i in range(11)])
        Traceback (most recent call last):
          ...
        fuzzypsi.okvs.InputTooLargeError: 11 pairs exceed the capacity of 10
        """
        (keys, values) = self._pairs(pairs)
        width = len(values[0]) if len(values) > 0 else self.length

        rows = []
        for (k, v) in zip(keys, values):
            (start, b) = self.row(k)
            rows.append((start, b, int(v)))
        rows = _radix_sort(rows, self.configuration.starts - 1)

        logger.debug(
            'solving %d rows over %d columns (band width %d)',
            len(rows), self.configuration.columns, self.configuration.band_width
        )
        solution = _solve(rows, self.configuration.columns)

        return encoding(value(x.to_bytes(width, 'little')) for x in solution)

    def decode(self: banded, e: encoding, k: Union[bytes, int]) -> value:
        """
        Return the XOR of the encoding entries selected by the row of the
        supplied key.

        >>> s = banded(10)
        >>> e = s.encode([(7, 700)])
        >>> s.decode(e, 7) == s.decode(e, 7)
        True
        """
        (start, b) = self.row(k)
        window = [
            int.from_bytes(entry, 'little')
            for entry in e[start:start + self.configuration.band_width]
        ]
        width = len(e[0]) if len(e) > 0 else self.length
        return value(b.dot(window).to_bytes(width, 'little'))

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
