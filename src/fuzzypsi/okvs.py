"""
.. module:: okvs

okvs module
===========

This module exports the classes :obj:`~fuzzypsi.okvs.key`,
:obj:`~fuzzypsi.okvs.value`, and :obj:`~fuzzypsi.okvs.encoding` for
representing the inputs and outputs of an oblivious key-value store (OKVS),
the abstract class :obj:`~fuzzypsi.okvs.okvs` that every encoding strategy
implements, and the exceptions raised when encoding fails.

An OKVS strategy turns a collection of key-value pairs into an
:obj:`encoding` (a sequence of values of fixed length) via
:obj:`okvs.encode`. The value associated with any one of those keys can then
be recovered from the encoding via :obj:`okvs.decode`. Decoding is a total
operation: a key that was not encoded yields some value rather than an error,
and callers must treat that value as opaque.

>>> k = key.from_int(1234)
>>> k.hex()
'd204000000000000'
>>> int(k)
1234
>>> v = value.from_int(6) ^ value.from_int(3)
>>> int(v)
5
"""
from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Tuple, Union
from abc import ABC, abstractmethod
import doctest
import secrets
from parts import parts

LENGTH = 8 # Default width (in bytes) of keys and values.

class EncodeError(ValueError):
    """
    Base class for all errors that can occur while encoding a collection
    of key-value pairs.
    """

class DuplicateKeyError(EncodeError):
    """
    Two of the supplied keys are equal. No encoding is produced.

    >>> str(DuplicateKeyError(key.from_int(5)))
    'duplicate key 0500000000000000'
    """
    def __init__(self, k: bytes):
        self.key = k
        super().__init__('duplicate key ' + bytes(k).hex())

class ZeroRowError(EncodeError):
    """
    Elimination reached a row with no remaining pivot. This failure depends
    on the hash outputs; it can be recovered from by retrying with a fresh
    salt or with a larger overhead.
    """
    def __init__(self, index: int):
        self.index = index
        super().__init__('row ' + str(index) + ' has no pivot')

class InputTooLargeError(EncodeError):
    """
    More pairs were supplied than the strategy instance was sized for.
    """
    def __init__(self, count: int, capacity: int):
        self.count = count
        self.capacity = capacity
        super().__init__(
            str(count) + ' pairs exceed the capacity of ' + str(capacity)
        )

class key(bytes):
    """
    Class for representing a key. Because this class is derived from
    :obj:`bytes`, it inherits methods such as :obj:`bytes.hex` and
    :obj:`bytes.fromhex`.

    >>> len(key())
    8
    >>> key.from_int(1) == bytes([1, 0, 0, 0, 0, 0, 0, 0])
    True
    """
    @classmethod
    def random(cls, length: int = LENGTH) -> key:
        """
        Return a key drawn uniformly at random.

        >>> len(key.random(16))
        16
        """
        return bytes.__new__(cls, secrets.token_bytes(length))

    @classmethod
    def from_int(cls, n: int, length: int = LENGTH) -> key:
        """
        Return the key that represents a non-negative integer (in
        little-endian order).

        >>> key.from_int(-1)
        Traceback (most recent call last):
          ...
        ValueError: integer must be non-negative and fit in 8 bytes
        """
        return bytes.__new__(cls, _to_bytes(n, length))

    def __new__(cls, bs: bytes = None) -> key:
        """
        If a bytes-like object is supplied, return a key object corresponding
        to it. If no argument is supplied, return a random key object.
        """
        return bytes.__new__(cls, bs) if bs is not None else cls.random()

    def __int__(self: key) -> int:
        return int.from_bytes(self, 'little')

    def to_int(self: key) -> int:
        """
        Return the integer represented by this instance.

        >>> key.from_int(2**40).to_int() == 2**40
        True
        """
        return int(self)

class value(bytes):
    """
    Class for representing a value. Values form a group under XOR.

    >>> v = value.random()
    >>> w = value.random()
    >>> (v ^ w) ^ w == v
    True
    >>> v ^ v == value.zero()
    True
    """
    @classmethod
    def random(cls, length: int = LENGTH) -> value:
        """
        Return a value drawn uniformly at random.
        """
        return bytes.__new__(cls, secrets.token_bytes(length))

    @classmethod
    def zero(cls, length: int = LENGTH) -> value:
        """
        Return the identity element of the group of values of the supplied
        width.

        >>> value.zero(4).hex()
        '00000000'
        """
        return bytes.__new__(cls, bytes(length))

    @classmethod
    def from_int(cls, n: int, length: int = LENGTH) -> value:
        """
        Return the value that represents a non-negative integer (in
        little-endian order).

        >>> value.from_int(258).hex()
        '0201000000000000'
        >>> value.from_int(2**64)
        Traceback (most recent call last):
          ...
        ValueError: integer must be non-negative and fit in 8 bytes
        """
        return bytes.__new__(cls, _to_bytes(n, length))

    def __new__(cls, bs: bytes = None) -> value:
        """
        If a bytes-like object is supplied, return a value object corresponding
        to it. If no argument is supplied, return a random value object.
        """
        return bytes.__new__(cls, bs) if bs is not None else cls.random()

    def __xor__(self: value, other: bytes) -> value:
        """
        Return the sum of this instance and another value of the same width.

        >>> value.from_int(1) ^ value.zero(4)
        Traceback (most recent call last):
          ...
        ValueError: values must have the same width
        """
        if len(other) != len(self):
            raise ValueError('values must have the same width')
        return bytes.__new__(
            value,
            (int(self) ^ int.from_bytes(other, 'little')).to_bytes(len(self), 'little')
        )

    def __int__(self: value) -> int:
        return int.from_bytes(self, 'little')

    def to_int(self: value) -> int:
        """
        Return the integer represented by this instance.

        >>> value.from_int(7).to_int()
        7
        """
        return int(self)

class encoding(list):
    """
    Class for representing the output of an encoding operation: an ordered
    sequence of values of equal width. The sequence carries no header; both
    parties must agree on the strategy parameters out of band.

    >>> e = encoding([value.from_int(1, 2), value.from_int(2, 2)])
    >>> e.to_bytes().hex()
    '01000200'
    >>> encoding.from_bytes(e.to_bytes(), 2) == e
    True
    """
    @classmethod
    def from_bytes(cls, bs: bytes, length: int = LENGTH) -> encoding:
        """
        Split a bytes-like object into consecutive values of the supplied
        width.

        >>> encoding.from_bytes(bytes(5), 2)
        Traceback (most recent call last):
          ...
        ValueError: encoding length must be a multiple of the value width
        """
        if length <= 0 or len(bs) % length != 0:
            raise ValueError('encoding length must be a multiple of the value width')
        if len(bs) == 0:
            return cls()
        return cls(value(bytes(part)) for part in parts(bytes(bs), length=length))

    def to_bytes(self: encoding) -> bytes:
        """
        Return the concatenation of the values in this instance.
        """
        return b''.join(bytes(v) for v in self)

def _to_bytes(n: Any, length: int) -> bytes:
    if not isinstance(n, int) or n < 0 or n.bit_length() > 8 * length:
        raise ValueError(
            'integer must be non-negative and fit in ' + str(length) + ' bytes'
        )
    return n.to_bytes(length, 'little')

class okvs(ABC):
    """
    Abstract base class for OKVS encoding strategies. Each instance is sized
    for a maximum number of pairs (its capacity) when it is constructed, and
    the same instance (or one constructed with identical arguments) must be
    used to decode what it has encoded.

    Keys and values may be supplied either as bytes-like objects or as
    non-negative integers; integers are converted using the widths
    :obj:`okvs.key_length` and :obj:`okvs.length` of the instance.
    """
    key_length = LENGTH

    def __init__(self: okvs, capacity: int, length: int = LENGTH):
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError('capacity must be a positive integer')
        if not isinstance(length, int) or length <= 0:
            raise ValueError('value width must be a positive integer')

        self.capacity = capacity
        self.length = length

    @abstractmethod
    def encode(
            self: okvs,
            pairs: Union[Iterable[Tuple[Any, Any]], Mapping[Any, Any]]
        ) -> encoding:
        """
        Encode the supplied key-value pairs.
        """

    @abstractmethod
    def decode(self: okvs, e: encoding, k: Union[bytes, int]) -> value:
        """
        Return the value decoded from an encoding for the supplied key.
        """

    def _key(self: okvs, k: Union[bytes, int]) -> key:
        if isinstance(k, int):
            return key.from_int(k, self.key_length)
        if isinstance(k, (bytes, bytearray)):
            return key(bytes(k))
        raise TypeError('key must be a bytes-like object or an integer')

    def _value(self: okvs, v: Union[bytes, int]) -> value:
        if isinstance(v, int):
            return value.from_int(v, self.length)
        if isinstance(v, (bytes, bytearray)):
            return value(bytes(v))
        raise TypeError('value must be a bytes-like object or an integer')

    def _pairs(
            self: okvs,
            pairs: Union[Iterable[Tuple[Any, Any]], Mapping[Any, Any]]
        ) -> Tuple[List[key], List[value]]:
        """
        Convert the supplied pairs into lists of keys and values, enforcing
        the capacity of this instance and the uniqueness of keys.
        """
        items = list(pairs.items() if isinstance(pairs, Mapping) else pairs)
        if len(items) > self.capacity:
            raise InputTooLargeError(len(items), self.capacity)

        (keys, values, seen) = ([], [], set())
        for (k, v) in items:
            k = self._key(k)
            if k in seen:
                raise DuplicateKeyError(k)
            seen.add(k)
            keys.append(k)
            values.append(self._value(v))

        if len({len(v) for v in values}) > 1:
            raise ValueError('values must have the same width')

        return (keys, values)

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
