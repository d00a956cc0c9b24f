"""
.. module:: subprotocol

subprotocol module
==================

This module defines the interface between the fuzzy PSI protocol in
:obj:`~fuzzypsi.protocol` and the comparison sub-protocol that the two
parties run for each bin. A sub-protocol is any object that provides the
three operations below (as attributes, so a class with static methods or a
module can serve as one):

* ``step1(point) -> (message, state)`` is invoked by the first party for
  each of its bins;
* ``step2(message, point) -> message`` is invoked by the second party for
  each of its bins, on the message decoded for that bin;
* ``step3(state, message, delta) -> Optional[int]`` is invoked by the first
  party for each of its bins, on the retained state and the reply decoded
  for that bin, and returns the matched value (if any).

Messages are non-negative integers less than ``2**64``.

The class :obj:`insecure` is a placeholder that exchanges points in the
clear. It is suitable only for exercising the protocol.

>>> (message, state) = insecure.step1(10)
>>> insecure.step3(state, insecure.step2(message, 11), 2)
11
>>> insecure.step3(state, insecure.step2(message, 13), 2) is None
True
"""
from __future__ import annotations
from typing import Any, Optional, Protocol, Tuple
import doctest

class subprotocol(Protocol):
    """
    Structural type of a sub-protocol implementation.
    """
    def step1(self, point: int) -> Tuple[int, Any]:
        ... # pragma: no cover

    def step2(self, message: int, point: int) -> int:
        ... # pragma: no cover

    def step3(self, state: Any, message: int, delta: int) -> Optional[int]:
        ... # pragma: no cover

class insecure:
    """
    Placeholder sub-protocol that reveals the points of both parties to
    one another.
    """
    @staticmethod
    def step1(point: int) -> Tuple[int, int]:
        """
        Return the point itself both as the message and as the state.

        >>> insecure.step1(5)
        (5, 5)
        """
        return (point, point)

    @staticmethod
    def step2(message: int, point: int) -> int: # pylint: disable=unused-argument
        """
        Return the point of the second party as the reply.

        >>> insecure.step2(5, 6)
        6
        """
        return point

    @staticmethod
    def step3(state: int, message: int, delta: int) -> Optional[int]:
        """
        Return the reply if it lies within ``delta`` of the retained point;
        otherwise, return ``None``.

        >>> insecure.step3(1, 0, 2)
        0
        >>> insecure.step3(100, 103, 2) is None
        True
        """
        if max(0, state - delta) <= message <= state + delta:
            return message
        return None

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
