"""
.. module:: band

band module
===========

This module exports the class :obj:`~fuzzypsi.band.band` for representing
fixed-width bit vectors over GF(2). A band is the row structure of the
banded OKVS strategy: it determines which contiguous encoding columns
contribute (via XOR) to the value decoded for a key.

The width of a band is arbitrary. The bits are held in a single
arbitrary-precision integer register (bit ``i`` of the register is column
``i`` of the band) and can be viewed as an array of 64-bit words via
:obj:`band.words`, so the width is not capped by any fixed register size.
"""
from __future__ import annotations
from typing import Any, Iterable, Sequence
import doctest
from bitlist import bitlist

WORD = 64 # Bits per word in the packed representation.

class band:
    """
    Class for representing a fixed-width bit vector. All operations
    preserve the width and discard any bits that would fall outside it.

    >>> b = band(8, 0b10110)
    >>> b.trailing_zeros()
    1
    >>> b.bit(2), b.bit(3)
    (True, False)
    >>> int(b >> 1)
    11
    >>> int(b << 4)
    96
    """
    __slots__ = ('width', '_register')

    @classmethod
    def from_bytes(cls, bs: bytes, width: int) -> band:
        """
        Construct an instance from a little-endian bytes-like object,
        discarding any bits beyond the designated width.

        >>> int(band.from_bytes(bytes([255, 255]), 12))
        4095
        """
        return cls(width, int.from_bytes(bs, 'little'))

    @classmethod
    def from_words(cls, words: Iterable[int], width: int) -> band:
        """
        Construct an instance from a sequence of 64-bit words (least
        significant word first).

        >>> b = band.from_words([1, 1], 128)
        >>> b.bit(0), b.bit(64)
        (True, True)
        """
        register = 0
        for (position, word) in enumerate(words):
            register |= (word & ((1 << WORD) - 1)) << (WORD * position)
        return cls(width, register)

    def __init__(self: band, width: int, register: int = 0):
        """
        Create a band of the supplied width from a non-negative integer.

        >>> band(0)
        Traceback (most recent call last):
          ...
        ValueError: band width must be a positive integer
        """
        if not isinstance(width, int) or width <= 0:
            raise ValueError('band width must be a positive integer')
        if register < 0:
            raise ValueError('band register must be a non-negative integer')

        self.width = width
        self._register = register & ((1 << width) - 1)

    def words(self: band) -> list:
        """
        Return the packed 64-bit words of this instance, least significant
        word first.

        >>> band(130, (1 << 129) | 5).words()
        [5, 0, 2]
        """
        return [
            (self._register >> (WORD * i)) & ((1 << WORD) - 1)
            for i in range((self.width + WORD - 1) // WORD)
        ]

    def bits(self: band) -> bitlist:
        """
        Return the bits of this instance as a :obj:`~bitlist.bitlist`
        (most significant column first).

        >>> band(6, 0b000101).bits()
        bitlist('000101')
        """
        return bitlist(self._register, self.width)

    def to_bytes(self: band) -> bytes:
        """
        Return the little-endian bytes-like representation of this instance.

        >>> band(12, 4095).to_bytes().hex()
        'ff0f'
        """
        return self._register.to_bytes((self.width + 7) // 8, 'little')

    def bit(self: band, index: int) -> bool:
        """
        Return whether the bit at the supplied column is set.
        """
        return 0 <= index < self.width and (self._register >> index) & 1 == 1

    def trailing_zeros(self: band) -> int:
        """
        Return the number of unset bits below the lowest set bit. For a band
        with no set bits, the width is returned.

        >>> band(16).trailing_zeros()
        16
        >>> band(16, 0b1000).trailing_zeros()
        3
        """
        if self._register == 0:
            return self.width
        return (self._register & -self._register).bit_length() - 1

    def dot(self: band, values: Sequence[int], offset: int = 0) -> int:
        """
        Return the inner product over GF(2) of this instance and the window
        of integer-encoded values starting at the supplied offset, *i.e.*,
        the XOR of every ``values[offset + i]`` for which bit ``i`` is set.

        >>> band(4, 0b0101).dot([1, 2, 4, 8])
        5
        >>> band(4, 0b0011).dot([1, 2, 4, 8], 2)
        12
        """
        result = 0
        register = self._register
        while register:
            low = register & -register
            result ^= values[offset + low.bit_length() - 1]
            register ^= low
        return result

    def _check(self: band, other: Any) -> band:
        if not isinstance(other, band):
            raise TypeError('band operations are defined only for bands')
        if other.width != self.width:
            raise ValueError('band widths must match')
        return other

    def __and__(self: band, other: band) -> band:
        """
        Return the bitwise conjunction of this instance and another band.

        >>> int(band(4, 0b0110) & band(4, 0b0011))
        2
        """
        return band(self.width, self._register & self._check(other)._register)

    def __xor__(self: band, other: band) -> band:
        """
        Return the sum over GF(2) of this instance and another band.

        >>> int(band(4, 0b0110) ^ band(4, 0b0011))
        5
        >>> band(4) ^ band(5)
        Traceback (most recent call last):
          ...
        ValueError: band widths must match
        """
        return band(self.width, self._register ^ self._check(other)._register)

    def __lshift__(self: band, distance: int) -> band:
        return band(self.width, self._register << distance)

    def __rshift__(self: band, distance: int) -> band:
        return band(self.width, self._register >> distance)

    def __bool__(self: band) -> bool:
        return self._register != 0

    def __int__(self: band) -> int:
        return self._register

    def __len__(self: band) -> int:
        return self.width

    def __eq__(self: band, other: Any) -> bool:
        return (
            isinstance(other, band) and
            other.width == self.width and
            other._register == self._register # pylint: disable=protected-access
        )

    def __hash__(self: band) -> int:
        return hash((self.width, self._register))

    def __repr__(self: band) -> str:
        return 'band(' + str(self.width) + ', ' + hex(self._register) + ')'

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
