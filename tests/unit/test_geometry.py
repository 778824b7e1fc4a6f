import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from rankcard_renderer.geometry import compute_fill_width


class FillWidthTests(unittest.TestCase):
    def test_non_positive_required_yields_sliver(self):
        for required in (0, -1, -100):
            self.assertEqual(compute_fill_width(50, required, 596.5), 1)

    def test_overshoot_clamps_to_track(self):
        self.assertEqual(compute_fill_width(500, 360, 650), 650)
        self.assertEqual(compute_fill_width(361, 360, 596.5), 596.5)

    def test_proportional(self):
        self.assertEqual(compute_fill_width(0, 100, 650), 0)
        self.assertEqual(compute_fill_width(50, 100, 650), 325)
        self.assertEqual(compute_fill_width(100, 100, 650), 650)
        self.assertEqual(compute_fill_width(50, 360, 650), 90)

    def test_monotonic_and_bounded(self):
        widths = [compute_fill_width(c, 360, 596.5) for c in range(0, 361)]
        self.assertEqual(widths, sorted(widths))
        self.assertTrue(all(0 <= w <= 596.5 for w in widths))


if __name__ == "__main__":
    unittest.main()
