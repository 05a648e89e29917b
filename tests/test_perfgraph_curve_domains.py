from __future__ import annotations

import random
import unittest

from perfgraph import Curve, DomainAggregator, GraphDataError, aggregate, extend_y_domain, y_extension_factor


def _pair_curve(name: str, points: list[tuple[float, float]]) -> Curve:
    return Curve(name=name, data=points, get_x=lambda d: d[0], get_y=lambda d: d[1])


A_POINTS = [(0, 10), (1, 20), (2, 15)]
B_POINTS = [(0, 5), (1, 25), (2, 10)]


class CurveTests(unittest.TestCase):
    def test_domains_match_true_extent(self) -> None:
        curve = _pair_curve("A", A_POINTS)
        self.assertEqual(curve.x_domain(), (0, 2))
        self.assertEqual(curve.y_domain(), (10, 20))

    def test_domains_invariant_under_reordering(self) -> None:
        points = [(float(i), float((i * 37) % 23) - 5.0) for i in range(50)]
        shuffled = list(points)
        random.Random(7).shuffle(shuffled)
        ordered = _pair_curve("ordered", points)
        mixed = _pair_curve("mixed", shuffled)
        self.assertEqual(ordered.x_domain(), mixed.x_domain())
        self.assertEqual(ordered.y_domain(), mixed.y_domain())
        self.assertEqual(ordered.y_domain(), (-5.0, 17.0))

    def test_empty_curve_has_no_domain(self) -> None:
        curve = _pair_curve("empty", [])
        self.assertTrue(curve.is_empty)
        self.assertIsNone(curve.x_domain())
        self.assertIsNone(curve.y_domain())

    def test_curve_data_is_snapshotted(self) -> None:
        points = list(A_POINTS)
        curve = _pair_curve("A", points)
        points.append((3, 99))
        self.assertEqual(len(curve), 3)
        self.assertEqual(curve.y_domain(), (10, 20))

    def test_rejects_blank_name(self) -> None:
        with self.assertRaisesRegex(GraphDataError, "non-empty"):
            _pair_curve("  ", A_POINTS)

    def test_rejects_non_callable_accessor(self) -> None:
        with self.assertRaisesRegex(GraphDataError, "callable"):
            Curve(name="bad", data=A_POINTS, get_x=0, get_y=lambda d: d[1])  # type: ignore[arg-type]


class DomainAggregationTests(unittest.TestCase):
    def test_aggregate_is_union_of_extents(self) -> None:
        curves = [_pair_curve("A", [(3, 1), (9, 2)]), _pair_curve("B", [(-1, 7), (4, 0)])]
        self.assertEqual(aggregate(curves, lambda c: c.x_domain()), (-1, 9))
        self.assertEqual(aggregate(curves, lambda c: c.y_domain()), (0, 7))

    def test_aggregate_of_nothing_is_none(self) -> None:
        self.assertIsNone(aggregate([], lambda c: c.x_domain()))
        self.assertIsNone(aggregate([_pair_curve("E", [])], lambda c: c.x_domain()))

    def test_extension_factor_table(self) -> None:
        self.assertEqual(y_extension_factor(1), 1.05)
        self.assertEqual(y_extension_factor(2), 1.15)
        self.assertEqual(y_extension_factor(3), 1.05)
        self.assertEqual(y_extension_factor(4), 1.25)
        self.assertEqual(y_extension_factor(9), 1.25)

    def test_extend_y_domain_floors_and_ceils(self) -> None:
        self.assertEqual(extend_y_domain((5, 25), 2), (4, 29))
        self.assertEqual(extend_y_domain((100, 200), 1), (97, 210))
        self.assertEqual(extend_y_domain((100, 200), 3), (97, 210))
        self.assertEqual(extend_y_domain((100, 200), 4), (97, 250))

    def test_two_curve_scenario(self) -> None:
        aggregator = DomainAggregator([_pair_curve("A", A_POINTS), _pair_curve("B", B_POINTS)])
        self.assertEqual(aggregator.curve_count, 2)
        self.assertEqual(aggregator.x_domain(), (0, 2))
        self.assertEqual(aggregator.raw_y_domain(), (5, 25))
        self.assertEqual(aggregator.y_domain(), (4, 29))

    def test_empty_curves_do_not_count(self) -> None:
        aggregator = DomainAggregator([_pair_curve("A", A_POINTS), _pair_curve("E", [])])
        self.assertEqual(aggregator.curve_count, 1)
        self.assertEqual(aggregator.y_domain(), (9, 21))


if __name__ == "__main__":
    unittest.main()
