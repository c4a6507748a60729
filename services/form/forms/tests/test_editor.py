"""Tests for the immutable editor state."""
from __future__ import annotations

from django.test import SimpleTestCase

from forms.layout import DropPolicy, EditorState, GridCell, PlacementInstance, WidthClass


def _state(*widths: WidthClass) -> EditorState:
    return EditorState(
        tuple(
            PlacementInstance(f"i{index}", index, width)
            for index, width in enumerate(widths, start=1)
        )
    )


def _shape(state: EditorState):
    return [(i.question_id, i.width) for i in state.instances]


class EditorStateTests(SimpleTestCase):
    def test_append_to_empty_canvas(self) -> None:
        state = EditorState().append(7)
        self.assertEqual(_shape(state), [(7, WidthClass.FULL)])

    def test_append_defaults_to_full_width(self) -> None:
        state = _state(WidthClass.HALF).append(2)
        self.assertEqual(_shape(state), [(1, WidthClass.HALF), (2, WidthClass.FULL)])
        self.assertEqual([(c.row, c.span) for c in state.to_cells()], [(1, 6), (2, 12)])

    def test_append_fitting_the_remainder(self) -> None:
        state = _state(WidthClass.HALF).append(2, DropPolicy.FIT_REMAINDER)
        self.assertEqual(_shape(state), [(1, WidthClass.HALF), (2, WidthClass.HALF)])
        self.assertEqual([(c.row, c.col) for c in state.to_cells()], [(1, 1), (1, 2)])

    def test_fit_remainder_opens_new_row_when_space_is_unusable(self) -> None:
        state = _state(WidthClass.HALF, WidthClass.ONE_THIRD).append(3, DropPolicy.FIT_REMAINDER)
        self.assertEqual(state.instances[-1].width, WidthClass.FULL)
        self.assertEqual(state.to_cells()[-1].row, 2)

        state = _state(WidthClass.FULL).append(2, DropPolicy.FIT_REMAINDER)
        self.assertEqual(_shape(state)[-1], (2, WidthClass.FULL))

    def test_insert_row_places_a_full_card_before_the_row(self) -> None:
        base = _state(WidthClass.HALF, WidthClass.HALF, WidthClass.FULL)
        state = base.insert_row(1, 9)
        self.assertEqual([i.question_id for i in state.instances], [1, 2, 9, 3])
        self.assertEqual(state.instances[2].width, WidthClass.FULL)

        self.assertEqual(base.insert_row(-5, 9).instances[0].question_id, 9)
        self.assertEqual(base.insert_row(99, 9).instances[-1].question_id, 9)

    def test_drop_into_row_fits_remaining_space(self) -> None:
        base = _state(WidthClass.ONE_THIRD, WidthClass.FULL)
        state = base.drop_into_row(0, 9, DropPolicy.FIT_REMAINDER)
        self.assertEqual(
            _shape(state),
            [(1, WidthClass.ONE_THIRD), (9, WidthClass.TWO_THIRDS), (2, WidthClass.FULL)],
        )
        self.assertEqual(
            state.to_cells(),
            [GridCell(1, 1, 1, 4), GridCell(9, 1, 2, 8), GridCell(2, 2, 1, 12)],
        )

    def test_drop_into_row_full_policy_starts_next_row(self) -> None:
        base = _state(WidthClass.ONE_THIRD, WidthClass.FULL)
        state = base.drop_into_row(0, 9)
        self.assertEqual(
            _shape(state),
            [(1, WidthClass.ONE_THIRD), (9, WidthClass.FULL), (2, WidthClass.FULL)],
        )

    def test_drop_into_missing_row_appends_a_row(self) -> None:
        state = _state(WidthClass.FULL).drop_into_row(5, 9, DropPolicy.FIT_REMAINDER)
        self.assertEqual(_shape(state)[-1], (9, WidthClass.FULL))

    def test_move_keeps_width(self) -> None:
        base = _state(WidthClass.HALF, WidthClass.HALF, WidthClass.ONE_THIRD)
        state = base.move("i3", 0)
        self.assertEqual(
            _shape(state),
            [(3, WidthClass.ONE_THIRD), (1, WidthClass.HALF), (2, WidthClass.HALF)],
        )

    def test_move_to_row_resets_width(self) -> None:
        base = _state(WidthClass.HALF, WidthClass.HALF, WidthClass.FULL)
        state = base.move_to_row("i2", 0)
        self.assertEqual(_shape(state)[0], (2, WidthClass.FULL))
        self.assertEqual(_shape(base.move_to_row("i1"))[-1], (1, WidthClass.FULL))

    def test_remove_and_resize(self) -> None:
        base = _state(WidthClass.FULL, WidthClass.FULL)
        self.assertEqual(_shape(base.remove("i1")), [(2, WidthClass.FULL)])
        resized = base.resize("i2", WidthClass.HALF)
        self.assertEqual(resized.instances[1].width, WidthClass.HALF)
        with self.assertRaises(KeyError):
            base.remove("missing")

    def test_operations_do_not_mutate(self) -> None:
        base = _state(WidthClass.HALF)
        base.append(2)
        base.resize("i1", WidthClass.FULL)
        base.remove("i1")
        self.assertEqual(_shape(base), [(1, WidthClass.HALF)])

    def test_rows_and_remainder(self) -> None:
        state = _state(WidthClass.HALF, WidthClass.ONE_THIRD, WidthClass.FULL)
        self.assertEqual(state.rows(), [range(0, 2), range(2, 3)])
        self.assertEqual(state.row_remainder(0), 2)
        self.assertEqual(state.row_remainder(1), 0)

    def test_from_cells_round_trip(self) -> None:
        cells = [GridCell(1, 1, 1, 4), GridCell(2, 1, 2, 8), GridCell(3, 2, 1, 12)]
        state = EditorState.from_cells(cells)
        self.assertEqual(state.to_cells(), cells)
