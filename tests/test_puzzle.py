"""
Unit tests for the puzzle data model and board geometry helpers.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pips_core.puzzle import (
    Cell,
    Constraint,
    ConstraintType,
    Domino,
    Placement,
    are_adjacent,
    build_adjacency,
    cell_key,
    constraint_label,
    domino_id,
    find_islands,
    is_contiguous,
    neighbors,
    parse_cell,
    parse_constraint_label,
    pips_by_cell,
)


class TestCell:
    """Cells are hashable, ordered values."""

    def test_equality_and_hash(self):
        assert Cell(1, 2) == Cell(1, 2)
        assert len({Cell(1, 2), Cell(1, 2), Cell(2, 1)}) == 2

    def test_ordering_is_row_major(self):
        assert sorted([Cell(1, 0), Cell(0, 3), Cell(0, 1)]) == [Cell(0, 1), Cell(0, 3), Cell(1, 0)]

    def test_key_round_trip(self):
        assert cell_key(Cell(3, 7)) == "3,7"
        assert parse_cell("3,7") == Cell(3, 7)
        assert parse_cell(" 3 , 7 ") == Cell(3, 7)

    def test_parse_cell_rejects_garbage(self):
        with pytest.raises(ValueError, match="Invalid cell key"):
            parse_cell("37")


class TestDomino:
    """Domino identity and pip helpers."""

    def test_domino_id_sorts_pips(self):
        assert domino_id([5, 3]) == "3-5"
        assert domino_id((3, 5), 2) == "3-5-2"

    def test_duplicates_are_distinct(self):
        a = Domino(domino_id((2, 3), 0), (2, 3))
        b = Domino(domino_id((2, 3), 1), (2, 3))
        assert a != b
        assert a.total == b.total == 5

    def test_is_double(self):
        assert Domino("4-4", (4, 4)).is_double()
        assert not Domino("4-5", (4, 5)).is_double()


class TestConstraintLabels:
    """Badge text rendering and parsing."""

    @pytest.mark.parametrize("constraint,label", [
        (Constraint(ConstraintType.SUM, 10), "Σ10"),
        (Constraint(ConstraintType.EQUAL), "="),
        (Constraint(ConstraintType.DIFFERENT), "≠"),
        (Constraint(ConstraintType.GREATER, 3), ">3"),
        (Constraint(ConstraintType.LESS, 5), "<5"),
        (Constraint(ConstraintType.ANY), "*"),
    ])
    def test_label_round_trip(self, constraint, label):
        assert constraint_label(constraint) == label
        assert parse_constraint_label(label) == constraint

    def test_bare_number_is_sum(self):
        assert parse_constraint_label("12") == Constraint(ConstraintType.SUM, 12)

    def test_ascii_not_equal(self):
        assert parse_constraint_label("!=") == Constraint(ConstraintType.DIFFERENT)

    @pytest.mark.parametrize("text", [">", "<x", "abc"])
    def test_bad_labels_raise(self, text):
        with pytest.raises(ValueError):
            parse_constraint_label(text)


class TestGeometry:
    """Adjacency, islands and contiguity."""

    def test_are_adjacent(self):
        assert are_adjacent(Cell(0, 0), Cell(0, 1))
        assert are_adjacent(Cell(1, 1), Cell(0, 1))
        assert not are_adjacent(Cell(0, 0), Cell(1, 1))
        assert not are_adjacent(Cell(0, 0), Cell(0, 0))
        assert not are_adjacent(Cell(0, 0), Cell(0, 2))

    def test_neighbor_order(self):
        assert neighbors(Cell(1, 1)) == [Cell(0, 1), Cell(2, 1), Cell(1, 0), Cell(1, 2)]

    def test_build_adjacency_keeps_board_cells_only(self):
        cells = [Cell(0, 0), Cell(0, 1), Cell(1, 1)]
        adj = build_adjacency(cells)
        assert adj[Cell(0, 0)] == [Cell(0, 1)]
        assert adj[Cell(0, 1)] == [Cell(1, 1), Cell(0, 0)]
        assert adj[Cell(1, 1)] == [Cell(0, 1)]

    def test_find_islands(self):
        cells = [Cell(0, 0), Cell(0, 1), Cell(5, 5), Cell(5, 6), Cell(0, 2)]
        islands = find_islands(cells)
        assert len(islands) == 2
        assert set(islands[0]) == {Cell(0, 0), Cell(0, 1), Cell(0, 2)}
        assert set(islands[1]) == {Cell(5, 5), Cell(5, 6)}

    def test_diagonal_cells_are_separate_islands(self):
        assert len(find_islands([Cell(0, 0), Cell(1, 1)])) == 2

    def test_is_contiguous(self):
        assert is_contiguous([])
        assert is_contiguous([Cell(0, 0), Cell(1, 0), Cell(1, 1)])
        assert not is_contiguous([Cell(0, 0), Cell(2, 0)])


class TestPlacements:
    """Placement pip lookup."""

    def test_pip_at(self):
        p = Placement(Domino("1-6", (6, 1)), (Cell(0, 0), Cell(0, 1)))
        assert p.pip_at(Cell(0, 0)) == 6
        assert p.pip_at(Cell(0, 1)) == 1
        assert p.pip_at(Cell(3, 3)) is None
        assert p.covers(Cell(0, 1))

    def test_pips_by_cell_first_wins(self):
        first = Placement(Domino("a", (1, 2)), (Cell(0, 0), Cell(0, 1)))
        second = Placement(Domino("b", (5, 6)), (Cell(0, 1), Cell(0, 2)))
        assert pips_by_cell([first, second]) == {Cell(0, 0): 1, Cell(0, 1): 2, Cell(0, 2): 6}
