from __future__ import annotations

from datetime import datetime, timedelta, timezone
import unittest

import numpy as np

from perfgraph.scales import (
    LinearScale,
    TimeScale,
    as_number,
    format_ticks_for_axis,
    generate_nice_ticks,
    tick_step,
)


class LinearScaleTests(unittest.TestCase):
    def test_maps_and_inverts(self) -> None:
        scale = LinearScale((0.0, 10.0), (0.0, 100.0))
        self.assertAlmostEqual(scale(5.0), 50.0)
        self.assertAlmostEqual(scale.invert(25.0), 2.5)

    def test_inverted_pixel_range(self) -> None:
        scale = LinearScale((4, 29), (240.0, 0.0))
        self.assertAlmostEqual(scale(4), 240.0)
        self.assertAlmostEqual(scale(29), 0.0)
        self.assertAlmostEqual(scale.invert(240.0), 4.0)

    def test_degenerate_domain_centers(self) -> None:
        scale = LinearScale((3.0, 3.0), (0.0, 100.0))
        self.assertEqual(scale(3.0), 50.0)
        self.assertEqual(scale.invert(80.0), 3.0)

    def test_ticks_use_round_steps(self) -> None:
        self.assertEqual(LinearScale((0, 2)).ticks(5), [0.0, 0.5, 1.0, 1.5, 2.0])
        self.assertEqual(LinearScale((4, 29)).ticks(5), [5.0, 10.0, 15.0, 20.0, 25.0])

    def test_tick_labels(self) -> None:
        scale = LinearScale((0, 2))
        self.assertEqual(scale.format_ticks(scale.ticks(5)), ["0", "0.5", "1", "1.5", "2"])


class TickHelperTests(unittest.TestCase):
    def test_tick_step_family(self) -> None:
        self.assertEqual(tick_step(0.0, 25.0, 5), 5.0)
        self.assertEqual(tick_step(0.0, 100.0, 5), 20.0)
        self.assertEqual(tick_step(0.0, 1.0, 10), 0.1)

    def test_fractional_ticks_have_no_drift(self) -> None:
        ticks = generate_nice_ticks(0.0, 1.0, 10)
        self.assertEqual(ticks.tolist(), [i / 10 for i in range(11)])

    def test_single_value_range(self) -> None:
        self.assertEqual(generate_nice_ticks(7.0, 7.0, 5).tolist(), [7.0])

    def test_rejects_non_positive_target(self) -> None:
        with self.assertRaises(ValueError):
            generate_nice_ticks(0.0, 1.0, 0)

    def test_format_preserves_integer_zeros(self) -> None:
        labels = format_ticks_for_axis(np.asarray([20.0, 30.0, 40.0], dtype=np.float64))
        self.assertEqual(labels, ["20", "30", "40"])


class TimeScaleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.end = self.start + timedelta(days=10)

    def test_maps_datetimes_and_inverts_to_datetimes(self) -> None:
        scale = TimeScale((self.start, self.end), (0.0, 100.0))
        middle = self.start + timedelta(days=5)
        self.assertAlmostEqual(scale(middle), 50.0)
        self.assertEqual(scale.invert(50.0), middle)
        self.assertEqual(scale.domain, (self.start, self.end))

    def test_as_number_uses_epoch_seconds(self) -> None:
        self.assertEqual(as_number(self.start), self.start.timestamp())
        self.assertEqual(as_number(3), 3.0)

    def test_day_ticks_start_at_midnight(self) -> None:
        scale = TimeScale((self.start, self.end), (0.0, 500.0))
        ticks = scale.ticks(5)
        self.assertEqual(ticks[0], self.start)
        self.assertEqual(ticks[1] - ticks[0], timedelta(days=2))
        self.assertEqual(len(ticks), 6)
        self.assertEqual(scale.format_ticks(ticks)[0], "Jan 01")

    def test_hour_ticks_use_clock_labels(self) -> None:
        scale = TimeScale((self.start, self.start + timedelta(hours=6)), (0.0, 500.0))
        ticks = scale.ticks(5)
        self.assertEqual(ticks[1] - ticks[0], timedelta(hours=1))
        self.assertEqual(scale.format_ticks(ticks)[:2], ["00:00", "01:00"])


if __name__ == "__main__":
    unittest.main()
