"""
.. module:: hashing

hashing module
==============

This module exports the two hash functions that determine the row of the
banded OKVS system corresponding to a key:

* :obj:`hash_index` maps a key to a start offset within a range, and
* :obj:`hash_band` maps a key to a :obj:`~fuzzypsi.band.band` of the
  requested width whose least significant bit is always set.

Both functions are built on BLAKE2b. They are made independent of one
another by domain separation (distinct personalization strings), and an
optional salt (used as the BLAKE2b key) selects a fresh pair of functions
when an encoding attempt must be retried.

>>> k = (1234).to_bytes(8, 'little')
>>> hash_index(k, 100) == hash_index(k, 100)
True
>>> hash_band(k, 128).bit(0)
True
"""
from __future__ import annotations
import doctest
import hashlib
from fuzzypsi.band import band

_INDEX_PERSON = b'fuzzypsi.index'
_BAND_PERSON = b'fuzzypsi.band'
_DIGEST = 64 # Maximum digest size (in bytes) of BLAKE2b.

SALT_LENGTH = hashlib.blake2b.MAX_KEY_SIZE
"""Maximum length (in bytes) of a salt."""

def hash_index(key: bytes, bound: int, salt: bytes = b'') -> int:
    """
    Return an integer in the range ``[0, bound)`` derived from the supplied
    key (and salt, if one is supplied).

    >>> k = (1234).to_bytes(8, 'little')
    >>> 0 <= hash_index(k, 7) < 7
    True
    >>> hash_index(k, 0)
    Traceback (most recent call last):
      ...
    ValueError: bound must be a positive integer
    """
    if bound <= 0:
        raise ValueError('bound must be a positive integer')

    digest = hashlib.blake2b(
        key, digest_size=8, key=salt, person=_INDEX_PERSON
    ).digest()
    return int.from_bytes(digest, 'little') % bound

def hash_band(key: bytes, width: int, salt: bytes = b'') -> band:
    """
    Return a band of the supplied width derived from the supplied key (and
    salt, if one is supplied). The least significant bit is forced to ``1``
    so that every row of the banded system has at least one pivot candidate.

    Widths beyond a single digest are supported by hashing the key together
    with a block counter.

    >>> k = (1234).to_bytes(8, 'little')
    >>> b = hash_band(k, 1000)
    >>> len(b), b.bit(0)
    (1000, True)
    >>> hash_band(k, 1000, b'salt') == b
    False
    """
    length = (width + 7) // 8
    stream = bytearray()
    for counter in range((length + _DIGEST - 1) // _DIGEST):
        stream.extend(hashlib.blake2b(
            counter.to_bytes(8, 'little') + key,
            digest_size=_DIGEST, key=salt, person=_BAND_PERSON
        ).digest())

    return band(width, int.from_bytes(stream[:length], 'little') | 1)

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
