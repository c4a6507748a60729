"""Tests for greedy grid packing."""
from __future__ import annotations

import itertools
from collections import defaultdict

from django.test import SimpleTestCase

from forms.layout import GridCell, PlacementInstance, WidthClass, is_valid_layout, pack, rows
from forms.layout.grid import MAX_CELLS_PER_ROW

FULL = WidthClass.FULL
TWO_THIRDS = WidthClass.TWO_THIRDS
HALF = WidthClass.HALF
ONE_THIRD = WidthClass.ONE_THIRD


def _widths(*widths: WidthClass):
    return [(f"q{index}", width) for index, width in enumerate(widths, start=1)]


class PackTests(SimpleTestCase):
    def test_rows_never_overflow(self) -> None:
        for length in range(1, 6):
            for combo in itertools.product(list(WidthClass), repeat=length):
                cells = pack(_widths(*combo))
                totals = defaultdict(int)
                counts = defaultdict(int)
                for cell in cells:
                    totals[cell.row] += cell.span
                    counts[cell.row] += 1
                self.assertTrue(all(total <= 12 for total in totals.values()), combo)
                self.assertTrue(all(count <= MAX_CELLS_PER_ROW for count in counts.values()), combo)

    def test_columns_are_contiguous_from_one(self) -> None:
        for combo in itertools.product(list(WidthClass), repeat=4):
            by_row = defaultdict(list)
            for cell in pack(_widths(*combo)):
                by_row[cell.row].append(cell.col)
            for cols in by_row.values():
                self.assertEqual(cols, list(range(1, len(cols) + 1)))

    def test_packing_is_deterministic(self) -> None:
        items = _widths(HALF, ONE_THIRD, TWO_THIRDS, FULL, HALF, HALF)
        self.assertEqual(pack(items), pack(items))
        self.assertEqual(pack(items), pack(list(items)))

    def test_full_then_halves(self) -> None:
        cells = pack(_widths(FULL, HALF, HALF))
        self.assertEqual(
            cells,
            [
                GridCell("q1", row=1, col=1, span=12),
                GridCell("q2", row=2, col=1, span=6),
                GridCell("q3", row=2, col=2, span=6),
            ],
        )

    def test_two_full_rows(self) -> None:
        cells = pack(_widths(FULL, FULL))
        self.assertEqual([(c.row, c.col, c.span) for c in cells], [(1, 1, 12), (2, 1, 12)])
        self.assertTrue(is_valid_layout(cells))

    def test_three_thirds_share_a_row(self) -> None:
        cells = pack(_widths(ONE_THIRD, ONE_THIRD, ONE_THIRD))
        self.assertEqual([(c.row, c.col) for c in cells], [(1, 1), (1, 2), (1, 3)])
        self.assertTrue(is_valid_layout(cells))

    def test_third_and_two_thirds_share_a_row(self) -> None:
        cells = pack(_widths(ONE_THIRD, TWO_THIRDS))
        self.assertEqual([(c.row, c.span) for c in cells], [(1, 4), (1, 8)])
        self.assertTrue(is_valid_layout(cells))

    def test_short_row_is_left_short(self) -> None:
        cells = pack(_widths(ONE_THIRD, FULL))
        self.assertEqual([(c.row, c.col, c.span) for c in cells], [(1, 1, 4), (2, 1, 12)])
        self.assertFalse(is_valid_layout(cells))

    def test_accepts_placement_instances_and_duplicate_questions(self) -> None:
        instances = [
            PlacementInstance("a", "q1", HALF),
            PlacementInstance("b", "q1", HALF),
        ]
        cells = pack(instances)
        self.assertEqual([c.question_id for c in cells], ["q1", "q1"])
        self.assertEqual([c.col for c in cells], [1, 2])

    def test_empty_input(self) -> None:
        self.assertEqual(pack([]), [])
        self.assertEqual(rows([]), [])


class RowsTests(SimpleTestCase):
    def test_rows_match_packed_rows(self) -> None:
        for combo in itertools.product(list(WidthClass), repeat=4):
            items = _widths(*combo)
            packed = pack(items)
            for number, group in enumerate(rows(items), start=1):
                self.assertTrue(all(packed[i].row == number for i in group), combo)

    def test_row_closes_when_full(self) -> None:
        self.assertEqual(
            rows(_widths(HALF, HALF, ONE_THIRD)),
            [range(0, 2), range(2, 3)],
        )
