"""
.. module:: polynomial

polynomial module
=================

This module exports the class :obj:`~fuzzypsi.polynomial.polynomial`, an
OKVS strategy that interpolates the unique polynomial of degree at most
``n - 1`` passing through ``n`` key-value points over the scalar field of
BLS12-381 (of order :obj:`MODULUS`). The encoding is the coefficient vector
of that polynomial and decoding evaluates it at the key.

>>> s = polynomial(4)
>>> e = s.encode([(1, 10), (2, 20), (3, 30), (7, 77)])
>>> len(e)
4
>>> s.decode(e, 7).to_int()
77

Note that the value decoded for a key that was not encoded is a
deterministic function of the interpolated polynomial. Unlike the banded
strategy (see :obj:`~fuzzypsi.banded`), this strategy offers no argument
that such a value is indistinguishable from a random one.
"""
from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Tuple, Union
import doctest
import logging
from fuzzypsi.okvs import okvs, value, encoding, DuplicateKeyError

logger = logging.getLogger(__name__)

MODULUS = 0x73eda753299d7d483339d80809a1d80553bda402fffe5bfeffffffff00000001
"""Order of the scalar field of BLS12-381."""

COEFFICIENT_LENGTH = 32 # Width (in bytes) of a serialized coefficient.

def _element(bs: bytes) -> int:
    return int.from_bytes(bs, 'little') % MODULUS

def _interpolate(xs: List[int], ys: List[int], keys: List[bytes]) -> List[int]:
    """
    Return the coefficients (lowest degree first) of the Lagrange
    interpolating polynomial for the supplied points.

    The basis polynomial for point ``i`` has numerator
    ``(x - x_0) ... (x - x_(n-1)) / (x - x_i)``, which is obtained by
    synthetic division of the product of all linear factors, and
    denominator ``(x_i - x_0) ... (x_i - x_(n-1))`` with the factor for ``i``
    omitted. The total cost is quadratic in the number of points.

    >>> _interpolate([1, 2], [3, 5], [b'1', b'2'])
    [1, 2]
    """
    n = len(xs)

    # Product of all linear factors, lowest degree first.
    master = [1]
    for x in xs:
        shifted = [0] + master
        for t in range(len(master)):
            shifted[t] = (shifted[t] - x * master[t]) % MODULUS
        master = shifted

    coefficients = [0] * n
    for i in range(n):
        denominator = 1
        for j in range(n):
            if j != i:
                difference = (xs[i] - xs[j]) % MODULUS
                if difference == 0:
                    raise DuplicateKeyError(keys[max(i, j)])
                denominator = (denominator * difference) % MODULUS

        scale = (ys[i] * pow(denominator, -1, MODULUS)) % MODULUS
        carry = 0
        for t in range(n, 0, -1):
            carry = (master[t] + xs[i] * carry) % MODULUS
            coefficients[t - 1] = (coefficients[t - 1] + scale * carry) % MODULUS

    return coefficients

class polynomial(okvs):
    """
    OKVS strategy based on polynomial interpolation. Values decoded by an
    instance have the width supplied to the constructor; values supplied for
    encoding must fit in that width. Keys and values must also be less
    than :obj:`MODULUS`, so that every pair is a distinct point of the field.

    >>> s = polynomial(2)
    >>> s.decode(s.encode({5: 1, 6: 2}), 6).hex()
    '0200000000000000'
    >>> try:
    ...     s.encode([(5, 1), (5, 2)])
    ... except DuplicateKeyError as e:
    ...     e.key.hex()
    '0500000000000000'
    """
    def encode(
            self: polynomial,
            pairs: Union[Iterable[Tuple[Any, Any]], Mapping[Any, Any]]
        ) -> encoding:
        """
        Return the coefficient vector of the polynomial interpolating the
        supplied pairs, padded with zero coefficients to the capacity of
        this instance.

        >>> polynomial(3).encode([(1, 9)]) == polynomial(3).encode({1: 9})
        True
        """
        (keys, values) = self._pairs(pairs)
        if any(len(v) > self.length for v in values):
            raise ValueError('values must fit in ' + str(self.length) + ' bytes')
        if any(int.from_bytes(k, 'little') >= MODULUS for k in keys):
            raise ValueError('keys must be less than the field modulus')
        if any(int(v) >= MODULUS for v in values):
            raise ValueError('values must be less than the field modulus')

        logger.debug('interpolating %d of %d points', len(keys), self.capacity)
        coefficients = _interpolate(
            [_element(k) for k in keys],
            [_element(v) for v in values],
            keys
        )
        coefficients.extend([0] * (self.capacity - len(coefficients)))

        return encoding(
            value(c.to_bytes(COEFFICIENT_LENGTH, 'little')) for c in coefficients
        )

    def decode(self: polynomial, e: encoding, k: Union[bytes, int]) -> value:
        """
        Evaluate the encoded polynomial at the supplied key (using Horner's
        method) and return the low-order bytes of the result.

        >>> s = polynomial(3)
        >>> e = s.encode([(1, 1), (2, 4), (3, 9)])
        >>> s.decode(e, 4).to_int() # The encoded polynomial is x**2.
        16
        """
        x = _element(self._key(k))
        y = 0
        for c in reversed(e):
            y = (y * x + _element(c)) % MODULUS

        return value((y % (1 << (8 * self.length))).to_bytes(self.length, 'little'))

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
