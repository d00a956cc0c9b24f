"""
.. module:: protocol

protocol module
===============

This module implements the three-step fuzzy private set intersection (PSI)
protocol between two parties, each holding a set of non-negative integer
points. A point of the first party matches a point of the second party if
the two are within the distance threshold ``delta`` of one another.

1. The first party bins its points (see :obj:`~fuzzypsi.bins`), runs the
   first step of the sub-protocol for each bin, and encodes the resulting
   messages (keyed by bin) in an OKVS (see :obj:`step1`).
2. The second party decodes a message for each of its own bins, runs the
   second step of the sub-protocol, and encodes its replies in an OKVS
   (see :obj:`step2`).
3. The first party decodes a reply for each of its bins and runs the last
   step of the sub-protocol; the union of the matched values is the output
   (see :obj:`step3`).

Transporting encodings between the parties is outside the scope of this
module. Along with each encoding, a party must communicate the capacity for
which its OKVS strategy instance was constructed so that the other party can
construct an identical instance.

>>> params = parameters(delta=2, options={'epsilon': 0.5})
>>> sorted(run([1, 10, 100, 1000, 10000], [1, 1000, 100], params))
[1, 100, 1000]
"""
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Set, Tuple
from dataclasses import dataclass, field
import doctest
import logging
import secrets
from fuzzypsi.bins import create_bins, invert_bin
from fuzzypsi.okvs import okvs, key, value, encoding, LENGTH
from fuzzypsi.banded import banded
from fuzzypsi.subprotocol import subprotocol, insecure

_logger = logging.getLogger(__name__)

MINIMUM = 64
"""Default minimum number of pairs in an encoded collection."""

@dataclass(frozen=True)
class parameters:
    """
    Parameters of one protocol run. Both parties must use identical
    parameters.

    * ``delta`` is the distance threshold.
    * ``h1`` and ``h2`` are the expansion factors that determine how many
      pairs the first and second party (respectively) encode for each real
      message: a party with ``m`` messages encodes
      ``max(m * h + 1, minimum)`` pairs, padding with random pairs.
    * ``encoder`` is the OKVS strategy class and ``options`` are additional
      keyword arguments for its constructor.

    The number of messages ``m`` is the number of bins that hold one of the
    party's points, not the number of points. It is never larger than the
    number of points, so the encodings are no larger than sizing by points
    would make them.

    With the default encoder and options (:obj:`~fuzzypsi.banded.banded`
    with ``epsilon`` of ``0.1`` and the default minimum of ``64`` pairs),
    encoding fails with :obj:`~fuzzypsi.okvs.ZeroRowError` in roughly one of
    every twenty runs. Supplying ``options={'epsilon': 0.5}`` makes such
    failures negligible at the cost of longer encodings.

    >>> parameters(delta=0)
    Traceback (most recent call last):
      ...
    ValueError: distance threshold must be a positive integer
    """
    delta: int = 2
    h1: int = 1
    h2: int = 2
    minimum: int = MINIMUM
    encoder: type = banded
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self: parameters):
        if not isinstance(self.delta, int) or self.delta <= 0:
            raise ValueError('distance threshold must be a positive integer')
        if self.h1 <= 0 or self.h2 <= 0:
            raise ValueError('expansion factors must be positive integers')
        if self.minimum <= 0:
            raise ValueError('minimum must be a positive integer')

    def capacity(self: parameters, messages: int, expansion: int) -> int:
        """
        Return the number of pairs to encode for the supplied number of real
        messages and expansion factor.

        >>> parameters().capacity(5, 1)
        64
        >>> parameters(minimum=8).capacity(5, 2)
        11
        """
        return max(messages * expansion + 1, self.minimum)

    def strategy(self: parameters, capacity: int) -> okvs:
        """
        Return an OKVS strategy instance sized for the supplied capacity.
        """
        return self.encoder(capacity, **self.options)

def _pad(
        pairs: Dict[key, value],
        capacity: int,
        random: Callable[[int], bytes]
    ) -> Dict[key, value]:
    """
    Add pairs with random keys and values until the supplied capacity is
    reached. Random keys never replace an existing pair.
    """
    while len(pairs) < capacity:
        k = key(random(LENGTH))
        if k not in pairs:
            pairs[k] = value(random(LENGTH))
    return pairs

def _origin(
        b: int,
        points: Iterable[int],
        delta: int,
        logger: logging.Logger
    ) -> Optional[int]:
    """
    Return the point that justifies a message for the supplied bin, if
    there is one. Only the first of several colliding points is used.
    """
    origins = invert_bin(b, points, delta)
    if len(origins) > 1:
        logger.warning(
            'bin %d holds %d points; only the first is used', b, len(origins)
        )
    return origins[0] if len(origins) > 0 else None

def step1(
        points: Iterable[int],
        params: parameters,
        protocol: subprotocol = insecure,
        random: Callable[[int], bytes] = secrets.token_bytes,
        logger: Optional[logging.Logger] = None
    ) -> Tuple[int, encoding, Dict[int, Any]]:
    """
    Run the first step on behalf of the first party. Return the capacity
    of the OKVS instance used, the encoding to send to the second party, and
    the sub-protocol states (keyed by bin) to retain for the last step.

    >>> params = parameters(delta=2, options={'epsilon': 0.5})
    >>> (capacity, e, states) = step1([10], params)
    >>> (capacity, len(e) > capacity, states)
    (64, True, {2: 10})
    """
    logger = logger or _logger
    points = list(points)
    (states, pairs) = ({}, {})

    for b in sorted(create_bins(points, params.delta)):
        point = _origin(b, points, params.delta, logger)
        if point is None:
            continue
        (message, state) = protocol.step1(point)
        states[b] = state
        pairs[key.from_int(b)] = value.from_int(message)

    capacity = params.capacity(len(pairs), params.h1)
    logger.info('step 1: encoding %d messages (capacity %d)', len(pairs), capacity)
    e = params.strategy(capacity).encode(_pad(pairs, capacity, random))
    return (capacity, e, states)

def step2(
        capacity: int,
        e: encoding,
        points: Iterable[int],
        params: parameters,
        protocol: subprotocol = insecure,
        random: Callable[[int], bytes] = secrets.token_bytes,
        logger: Optional[logging.Logger] = None
    ) -> Tuple[int, encoding]:
    """
    Run the second step on behalf of the second party, given the capacity
    and encoding received from the first party. Return the capacity of the
    OKVS instance used and the encoding to send back to the first party.
    """
    logger = logger or _logger
    points = list(points)
    received = params.strategy(capacity)
    pairs = {}

    for b in sorted(create_bins(points, params.delta)):
        message = received.decode(e, key.from_int(b)).to_int()
        point = _origin(b, points, params.delta, logger)
        if point is None:
            continue
        pairs[key.from_int(b)] = value.from_int(protocol.step2(message, point))

    capacity = params.capacity(len(pairs), params.h2)
    logger.info('step 2: encoding %d replies (capacity %d)', len(pairs), capacity)
    return (capacity, params.strategy(capacity).encode(_pad(pairs, capacity, random)))

def step3(
        capacity: int,
        e: encoding,
        states: Mapping[int, Any],
        params: parameters,
        protocol: subprotocol = insecure,
        logger: Optional[logging.Logger] = None
    ) -> Set[int]:
    """
    Run the last step on behalf of the first party, given the capacity and
    encoding received from the second party and the states retained from
    the first step. Return the fuzzy intersection.
    """
    logger = logger or _logger
    received = params.strategy(capacity)
    intersection = set()

    for b in sorted(states):
        message = received.decode(e, key.from_int(b)).to_int()
        matched = protocol.step3(states[b], message, params.delta)
        if matched is not None:
            logger.debug('bin %d matched', b)
            intersection.add(matched)

    logger.info('step 3: %d matches', len(intersection))
    return intersection

def run(
        items_a: Iterable[int],
        items_b: Iterable[int],
        params: Optional[parameters] = None,
        protocol: subprotocol = insecure,
        random: Callable[[int], bytes] = secrets.token_bytes,
        logger: Optional[logging.Logger] = None
    ) -> Set[int]:
    """
    Run all three steps of the protocol in sequence for the two supplied
    sets of points and return the fuzzy intersection. Any error raised by
    an encoding operation aborts the run.

    >>> from fuzzypsi.polynomial import polynomial
    >>> sorted(run([5, 50], [7, 80], parameters(delta=2, encoder=polynomial)))
    [7]
    """
    params = params if params is not None else parameters()
    logger = logger or _logger
    logger.info(
        'running fuzzy PSI with delta=%d, h1=%d, h2=%d, encoder=%s',
        params.delta, params.h1, params.h2, params.encoder.__name__
    )

    (capacity_a, e_a, states) = step1(items_a, params, protocol, random, logger)
    (capacity_b, e_b) = step2(capacity_a, e_a, items_b, params, protocol, random, logger)
    return step3(capacity_b, e_b, states, params, protocol, logger)

if __name__ == '__main__':
    doctest.testmod() # pragma: no cover
