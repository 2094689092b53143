import unittest

from models.schemas import VisibilityState
from sync.emphasis import MarkerEmphasisInterpolator, emphasis_scale


class EmphasisTests(unittest.TestCase):
    def test_peak_at_item_offset(self):
        for index in range(4):
            self.assertEqual(emphasis_scale(index * 300, index, 300), 1.5)

    def test_halfway_between_breakpoints(self):
        self.assertAlmostEqual(emphasis_scale(450, 1, 300), 1.25)
        self.assertAlmostEqual(emphasis_scale(150, 1, 300), 1.25)

    def test_clamped_outside_window(self):
        self.assertEqual(emphasis_scale(0, 2, 300), 1.0)
        self.assertEqual(emphasis_scale(-1000, 0, 300), 1.0)
        self.assertEqual(emphasis_scale(5000, 1, 300), 1.0)

    def test_rises_then_falls_around_item(self):
        index = 2
        rising = [emphasis_scale(offset, index, 300) for offset in range(300, 601, 25)]
        falling = [emphasis_scale(offset, index, 300) for offset in range(600, 901, 25)]

        self.assertTrue(all(a <= b for a, b in zip(rising, rising[1:])))
        self.assertTrue(all(a >= b for a, b in zip(falling, falling[1:])))
        self.assertTrue(all(1.0 <= s <= 1.5 for s in rising + falling))

    def test_hidden_tray_forces_base_scale(self):
        interpolator = MarkerEmphasisInterpolator(item_width=300)
        self.assertEqual(interpolator.scales(300, 3, VisibilityState.HIDDEN), [1.0, 1.0, 1.0])
        self.assertEqual(interpolator.scales(300, 3, VisibilityState.SHOWN), [1.0, 1.5, 1.0])

    def test_custom_peak_scale(self):
        interpolator = MarkerEmphasisInterpolator(item_width=200, peak_scale=2.0)
        self.assertEqual(interpolator.scale_for(200, 1), 2.0)
        self.assertAlmostEqual(interpolator.scale_for(300, 1), 1.5)

    def test_rejects_non_positive_width(self):
        with self.assertRaises(ValueError):
            MarkerEmphasisInterpolator(item_width=0)


if __name__ == "__main__":
    unittest.main()
