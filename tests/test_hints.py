"""
Unit tests for hints read from a stored solution.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pips_core.hints import hint, next_step, reveal_step
from pips_core.puzzle import Cell, Domino, Placement
from pips_core.samples import sample_puzzle
from pips_core.solver import Solution, solve


@pytest.fixture(scope="module")
def puzzle():
    return sample_puzzle()


@pytest.fixture(scope="module")
def solution(puzzle):
    return solve(puzzle)


class TestHint:
    """hint() looks up the covering placement."""

    def test_every_cell_has_a_hint(self, puzzle, solution):
        for cell in puzzle.valid_cells:
            placement = hint(puzzle, solution, cell)
            assert placement is not None
            assert placement.covers(cell)

    def test_uncovered_cell_returns_none(self, puzzle):
        partial = Solution(
            placements=[Placement(Domino("2-3-0", (2, 3)), (Cell(0, 0), Cell(0, 1)))],
            is_valid=False,
        )
        assert hint(puzzle, partial, Cell(3, 3)) is None

    def test_no_solution(self, puzzle):
        assert hint(puzzle, None, Cell(0, 0)) is None


class TestReveal:
    """Step-by-step reveal and next move."""

    def test_reveal_prefix(self, solution):
        assert reveal_step(solution, 3) == solution.placements[:3]

    @pytest.mark.parametrize("index,expected", [(-2, 0), (0, 0), (100, 8)])
    def test_reveal_clamps(self, solution, index, expected):
        assert len(reveal_step(solution, index)) == expected

    def test_reveal_without_solution(self):
        assert reveal_step(None, 2) == []

    def test_next_step_from_empty_board(self, solution):
        assert next_step(solution, []) == solution.placements[0]

    def test_next_step_skips_made_placements(self, solution):
        first = solution.placements[0]
        # same cells and pips under another id still count as made
        swapped = Placement(Domino("other", first.domino.pips), first.cells)
        assert next_step(solution, [swapped]) == solution.placements[1]

    def test_next_step_when_finished(self, solution):
        assert next_step(solution, solution.placements) is None

    def test_next_step_without_solution(self):
        assert next_step(None, []) is None
