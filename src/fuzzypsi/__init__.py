"""
Python library that implements oblivious key-value stores (OKVS) and the
distance-bucketing layer used to build fuzzy private set intersection (PSI)
protocols.

This module gives users direct access to the individual modules, each of
which is dedicated to one component and its associated classes and methods.
"""
from fuzzypsi import band
from fuzzypsi import hashing
from fuzzypsi import bins
from fuzzypsi import okvs
from fuzzypsi import polynomial
from fuzzypsi import banded
from fuzzypsi import subprotocol
from fuzzypsi import protocol
