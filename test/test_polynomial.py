"""
Test suite containing functional unit tests for the polynomial OKVS strategy
in the :obj:`fuzzypsi.polynomial` module.
"""
# pylint: disable=C0103,C0116
from unittest import TestCase
from fountains import fountains

from fuzzypsi.okvs import key, value, encoding, DuplicateKeyError, InputTooLargeError
from fuzzypsi.polynomial import polynomial, MODULUS, COEFFICIENT_LENGTH, _interpolate

TRIALS_PER_TEST = 16

def pairs(count, seed=bytes(0)):
    """
    Return a list of pseudorandom key-value pairs.
    """
    return [
        (key(bs[:8]), value(bs[8:]))
        for bs in fountains(16, seed=seed, limit=count)
    ]

def evaluate(coefficients, x):
    return sum(c * pow(x, i, MODULUS) for (i, c) in enumerate(coefficients)) % MODULUS

class Test_interpolate(TestCase):
    """
    Direct tests of the interpolation function.
    """
    def test_points(self):
        for n in [1, 2, 3, 10]:
            xs = [
                int.from_bytes(bs, 'little')
                for bs in fountains(32, seed=bytes([n]), limit=n)
            ]
            ys = [
                int.from_bytes(bs, 'little') % MODULUS
                for bs in fountains(32, seed=bytes([n, 1]), limit=n)
            ]
            coefficients = _interpolate(xs, ys, [bytes(8)] * n)
            self.assertEqual(len(coefficients), n)
            for (x, y) in zip(xs, ys):
                self.assertEqual(evaluate(coefficients, x), y)

    def test_constant(self):
        self.assertEqual(_interpolate([5], [9], [bytes(8)]), [9])

    def test_empty(self):
        self.assertEqual(_interpolate([], [], []), [])

    def test_duplicate(self):
        keys = [key.from_int(i) for i in range(3)]
        with self.assertRaises(DuplicateKeyError) as context:
            _interpolate([1, 2, 1], [1, 2, 3], keys)
        self.assertEqual(context.exception.key, keys[2])

class Test_polynomial(TestCase):
    """
    Tests of encoding and decoding with the polynomial strategy.
    """
    def test_round_trip(self):
        for n in [1, 2, 8, 50]:
            ps = pairs(n, bytes([n]))
            s = polynomial(n)
            e = s.encode(ps)
            for (k, v) in ps:
                self.assertEqual(s.decode(e, k), v)

    def test_encoding_shape(self):
        for (capacity, n) in [(1, 0), (4, 1), (10, 10), (64, 3)]:
            e = polynomial(capacity).encode(pairs(n) if n > 0 else [])
            self.assertEqual(len(e), capacity)
            self.assertTrue(all(len(c) == COEFFICIENT_LENGTH for c in e))
            self.assertTrue(all(int(c) < MODULUS for c in e))

    def test_padding_is_zero(self):
        e = polynomial(8).encode(pairs(3))
        self.assertTrue(all(c == value.zero(COEFFICIENT_LENGTH) for c in e[3:]))

    def test_mapping_and_iterable(self):
        ps = pairs(5)
        s = polynomial(5)
        self.assertEqual(s.encode(ps), s.encode(dict(ps)))

    def test_order_independent(self):
        ps = pairs(6)
        s = polynomial(6)
        self.assertEqual(s.encode(ps), s.encode(list(reversed(ps))))

    def test_known_polynomial(self):
        s = polynomial(3)
        e = s.encode([(1, 1), (2, 4), (3, 9)])
        self.assertEqual([int(c) for c in e], [0, 0, 1])
        for x in range(20):
            self.assertEqual(s.decode(e, x).to_int(), x * x)

    def test_value_width(self):
        s = polynomial(4, 2)
        e = s.encode([(1, bytes([1, 2])), (2, bytes([3, 4]))])
        self.assertEqual(s.decode(e, 2), bytes([3, 4]))
        self.assertEqual(len(s.decode(e, 3)), 2)
        self.assertRaises(ValueError, lambda: s.encode([(1, bytes(3))]))

    def test_wide_values(self):
        s = polynomial(2, 32)
        v = (MODULUS - 1).to_bytes(32, 'little')
        e = s.encode([(1, v), (2, bytes(32))])
        self.assertEqual(s.decode(e, 1), v)
        self.assertEqual(s.decode(e, 2), bytes(32))

    def test_values_beyond_modulus(self):
        s = polynomial(2, 32)
        for n in [MODULUS, MODULUS + 5, 2 ** 256 - 1]:
            with self.assertRaises(ValueError):
                s.encode([(1, n.to_bytes(32, 'little')), (2, bytes(32))])

    def test_keys_beyond_modulus(self):
        s = polynomial(2)
        k = (MODULUS + 1).to_bytes(32, 'little')
        with self.assertRaises(ValueError) as context:
            s.encode([(k, 1), (1, 2)])
        self.assertFalse(isinstance(context.exception, DuplicateKeyError))

    def test_decode_absent_key(self):
        s = polynomial(16)
        e = s.encode(pairs(16))
        for (k, _) in pairs(TRIALS_PER_TEST, bytes([255])):
            v = s.decode(e, k)
            self.assertTrue(isinstance(v, value))
            self.assertEqual(len(v), 8)

    def test_decode_from_bytes(self):
        ps = pairs(10)
        s = polynomial(10)
        e = encoding.from_bytes(s.encode(ps).to_bytes(), COEFFICIENT_LENGTH)
        for (k, v) in ps:
            self.assertEqual(s.decode(e, k), v)

    def test_duplicate_key(self):
        with self.assertRaises(DuplicateKeyError) as context:
            polynomial(2).encode([(5, 1), (5, 2)])
        self.assertEqual(context.exception.key, key.from_int(5))

    def test_input_too_large(self):
        with self.assertRaises(InputTooLargeError) as context:
            polynomial(3).encode(pairs(4))
        self.assertEqual((context.exception.count, context.exception.capacity), (4, 3))
