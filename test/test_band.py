"""
Test suite containing functional unit tests for the :obj:`fuzzypsi.band`
module, as well as unit tests confirming algebraic relationships among the
operations on bands.
"""
# pylint: disable=C0103,C0116
from unittest import TestCase
import importlib
from bitlist import bitlist
from fountains import fountains

from fuzzypsi.band import band

# Constants for the number of inputs to include in each test and for the
# widths of the bands under test.
TRIALS_PER_TEST = 16
WIDTHS = [1, 8, 63, 64, 65, 128, 200, 256, 300]

def bands(width, seed=bytes(0)):
    """
    Yield pseudorandom bands of the supplied width.
    """
    for bs in fountains((width + 7) // 8, seed=seed, limit=TRIALS_PER_TEST):
        yield band.from_bytes(bs, width)

class Test_namespace(TestCase):
    """
    Check that namespaces provide access to the expected classes.
    """
    def test_init(self):
        init = importlib.import_module('fuzzypsi.__init__')
        self.assertTrue('band' in init.__dict__)

    def test_module(self):
        module = importlib.import_module('fuzzypsi.band')
        self.assertTrue('band' in module.__dict__)

class Test_band(TestCase):
    """
    Direct tests of the methods of the band class.
    """
    def test_width(self):
        for width in [0, -1]:
            self.assertRaises(ValueError, lambda w=width: band(w))
        self.assertRaises(ValueError, lambda: band(8, -1))

    def test_mask(self):
        self.assertEqual(int(band(4, 0xff)), 0xf)
        self.assertEqual(int(band(4, 0b1000) << 1), 0)

    def test_words(self):
        for width in WIDTHS:
            for b in bands(width):
                words = b.words()
                self.assertEqual(len(words), (width + 63) // 64)
                self.assertTrue(all(0 <= w < 2 ** 64 for w in words))
                self.assertEqual(band.from_words(words, width), b)

    def test_bytes(self):
        for width in WIDTHS:
            for b in bands(width):
                self.assertEqual(band.from_bytes(b.to_bytes(), width), b)

    def test_bits(self):
        for width in WIDTHS:
            for b in bands(width):
                bits = b.bits()
                self.assertEqual(len(bits), width)
                self.assertEqual(bits, bitlist(int(b), width))
                for i in range(width):
                    self.assertEqual(b.bit(i), bits[width - 1 - i] == 1)

    def test_bit_out_of_range(self):
        b = band(8, 0xff)
        self.assertFalse(b.bit(8))
        self.assertFalse(b.bit(-1))

    def test_trailing_zeros(self):
        for width in WIDTHS:
            for b in bands(width):
                bits = list(b.bits())
                expected = next(
                    (i for (i, bit) in enumerate(reversed(bits)) if bit == 1),
                    width
                )
                self.assertEqual(b.trailing_zeros(), expected)

    def test_trailing_zeros_zero(self):
        for width in WIDTHS:
            self.assertEqual(band(width).trailing_zeros(), width)
            self.assertFalse(band(width))

    def test_dot(self):
        values = list(range(1, 301))
        for width in WIDTHS:
            for b in bands(width):
                expected = 0
                for i in range(width):
                    if b.bit(i):
                        expected ^= values[i]
                self.assertEqual(b.dot(values), expected)

    def test_dot_offset(self):
        values = [1 << i for i in range(16)]
        self.assertEqual(band(4, 0b1001).dot(values, 3), (1 << 3) | (1 << 6))

    def test_type_and_width_mismatch(self):
        self.assertRaises(TypeError, lambda: band(8) ^ 1)
        self.assertRaises(ValueError, lambda: band(8) & band(9))

    def test_repr_and_hash(self):
        self.assertEqual(repr(band(8, 3)), 'band(8, 0x3)')
        self.assertEqual(len({band(8, 3), band(8, 3), band(9, 3)}), 2)

class Test_algebra(TestCase):
    """
    Tests of algebraic properties of operations on bands.
    """
    def test_xor_cancel(self):
        for width in WIDTHS:
            for (a, b) in zip(bands(width), bands(width, bytes([1]))):
                self.assertEqual((a ^ b) ^ b, a)
                self.assertFalse(a ^ a)

    def test_and_xor_distribute(self):
        for width in WIDTHS:
            for (a, b) in zip(bands(width), bands(width, bytes([1]))):
                c = band(width, int(a) >> 1)
                self.assertEqual(a & (b ^ c), (a & b) ^ (a & c))

    def test_shift_xor_distribute(self):
        for width in WIDTHS:
            for (a, b) in zip(bands(width), bands(width, bytes([1]))):
                for distance in [0, 1, 7, width // 2]:
                    self.assertEqual((a ^ b) >> distance, (a >> distance) ^ (b >> distance))
                    self.assertEqual((a ^ b) << distance, (a << distance) ^ (b << distance))

    def test_dot_linear(self):
        values = [(i * 2654435761) % (2 ** 64) for i in range(300)]
        for width in WIDTHS:
            for (a, b) in zip(bands(width), bands(width, bytes([1]))):
                self.assertEqual((a ^ b).dot(values), a.dot(values) ^ b.dot(values))
