"""
Test suite containing functional unit tests for the binning functions in the
:obj:`fuzzypsi.bins` module.
"""
# pylint: disable=C0103,C0116
from unittest import TestCase
from fountains import fountains

from fuzzypsi import bins

TRIALS_PER_TEST = 64

def coordinates(length=2, seed=bytes(0)):
    """
    Yield pseudorandom non-negative integer coordinates.
    """
    for bs in fountains(length, seed=seed, limit=TRIALS_PER_TEST):
        yield int.from_bytes(bs, 'little')

class Test_bin(TestCase):
    """
    Tests of the function that assigns a coordinate to its bin.
    """
    def test_bin(self):
        self.assertEqual(bins.bin(8, 2), 2)
        self.assertEqual(bins.bin(0, 2), 0)
        self.assertEqual(bins.bin(3, 2), 0)
        self.assertEqual(bins.bin(4, 2), 1)

    def test_same_bin(self):
        self.assertEqual(bins.bin(8, 2), bins.bin(9, 2))

    def test_second_coordinate(self):
        points = [(1, 8), (1, 9), (2, 13), (3, 100)]
        binned = [(x, bins.bin(y, 2)) for (x, y) in points]
        self.assertEqual(binned, [(1, 2), (1, 2), (2, 3), (3, 25)])

    def test_close_values_same_or_adjacent(self):
        for delta in [1, 2, 10, 1000]:
            for (v, d) in zip(coordinates(), coordinates(1, bytes([1]))):
                w = v + (d % (delta + 1))
                self.assertTrue(bins.bin(w, delta) - bins.bin(v, delta) in (0, 1))

    def test_invalid(self):
        self.assertRaises(ValueError, lambda: bins.bin(-1, 2))
        self.assertRaises(ValueError, lambda: bins.bin(1, 0))
        self.assertRaises(ValueError, lambda: bins.bin(1, -2))
        self.assertRaises(ValueError, lambda: bins.bin(1.5, 2))

class Test_create_bins(TestCase):
    """
    Tests of the function that enumerates the bins a set of points can share.
    """
    def test_create_bins(self):
        self.assertEqual(bins.create_bins([8, 12], 2), {1, 2, 3})

    def test_window_at_zero(self):
        self.assertEqual(bins.create_bins([0], 2), {0})
        self.assertEqual(bins.create_bins([1], 2), {0})

    def test_matches_exhaustive_window(self):
        for delta in [1, 2, 5]:
            for v in coordinates():
                expected = {
                    bins.bin(u, delta)
                    for u in range(max(0, v - delta), v + delta + 1)
                }
                self.assertEqual(bins.create_bins([v], delta), expected)

    def test_contains_bins_of_close_values(self):
        for delta in [1, 3, 100]:
            for v in coordinates():
                created = bins.create_bins([v], delta)
                for u in range(max(0, v - delta), v + delta + 1):
                    self.assertTrue(bins.bin(u, delta) in created)

    def test_union(self):
        points = list(coordinates())
        union = set()
        for v in points:
            union |= bins.create_bins([v], 3)
        self.assertEqual(bins.create_bins(points, 3), union)

    def test_empty(self):
        self.assertEqual(bins.create_bins([], 2), set())

    def test_invalid(self):
        self.assertRaises(ValueError, lambda: bins.create_bins([-1], 2))
        self.assertRaises(ValueError, lambda: bins.create_bins([1], 0))

class Test_invert_bin(TestCase):
    """
    Tests of the function that recovers the points belonging to a bin.
    """
    def test_invert_bin(self):
        self.assertEqual(bins.invert_bin(2, [8, 9, 12], 2), [8, 9])
        self.assertEqual(bins.invert_bin(3, [8, 9, 12], 2), [12])
        self.assertEqual(bins.invert_bin(1, [8, 9, 12], 2), [])

    def test_inverse(self):
        points = list(coordinates())
        for v in points:
            self.assertTrue(v in bins.invert_bin(bins.bin(v, 7), points, 7))

    def test_order(self):
        self.assertEqual(bins.invert_bin(0, [3, 1, 2], 2), [3, 1, 2])
