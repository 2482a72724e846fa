"""
Unit tests for the validator module.

Each test builds a small puzzle that trips exactly the check under test,
plus the rejection scenarios for odd boards, unbalanced islands and split
regions.
"""

import pytest
import sys
import os
import re

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pips_core.puzzle import Cell, Constraint, ConstraintType, Domino, Puzzle, Region
from pips_core.samples import l_shaped_puzzle, sample_puzzle
from pips_core.validator import ValidationResult, validate


def make_puzzle(coords, regions=None, tiles=None):
    cells = [Cell(r, c) for r, c in coords]
    if tiles is None:
        tiles = [(1, 2)] * (len(cells) // 2)
    dominoes = [Domino(f"d{i}", tuple(t)) for i, t in enumerate(tiles)]
    height = max((c.row for c in cells), default=-1) + 1
    width = max((c.col for c in cells), default=-1) + 1
    return Puzzle(width, height, cells, regions or [], dominoes)


def region(rid, coords, ctype=ConstraintType.ANY, value=None):
    return Region(rid, [Cell(r, c) for r, c in coords], Constraint(ctype, value))


def has_error(result: ValidationResult, text: str) -> bool:
    return any(text in e for e in result.errors)


def has_warning(result: ValidationResult, text: str) -> bool:
    return any(text in w for w in result.warnings)


# ============================================================================
# Well-formed puzzles
# ============================================================================

class TestValidPuzzles:
    """Puzzles that should pass."""

    def test_sample_puzzle_is_ok(self):
        result = validate(sample_puzzle())
        assert result.ok
        assert result.errors == []

    def test_two_islands_are_legal(self):
        puzzle = make_puzzle(
            [(0, 0), (0, 1), (3, 3), (4, 3)],
            regions=[region("a", [(0, 0), (0, 1)]), region("b", [(3, 3), (4, 3)])],
        )
        assert validate(puzzle).ok

    def test_summary(self):
        assert validate(sample_puzzle()).summary() == "OK: 0 error(s), 0 warning(s)"


# ============================================================================
# Board and count checks
# ============================================================================

class TestBoardChecks:
    """Checks 1-5: cells, counts and domino pips."""

    def test_empty_board(self):
        result = validate(make_puzzle([]))
        assert not result.ok
        assert has_error(result, "no valid cells")

    def test_duplicate_cells(self):
        result = validate(make_puzzle([(0, 0), (0, 1), (0, 1)], tiles=[(1, 2)]))
        assert not result.ok
        assert has_error(result, "Cell (0, 1) is listed more than once")

    def test_odd_cell_count(self):
        """A 3-cell single-region board with one domino can never be tiled."""
        puzzle = make_puzzle(
            [(0, 0), (0, 1), (0, 2)],
            regions=[region("r", [(0, 0), (0, 1), (0, 2)], ConstraintType.SUM, 5)],
            tiles=[(2, 3)],
        )
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "odd cell count")

    def test_domino_count_mismatch(self):
        result = validate(make_puzzle([(0, 0), (0, 1)], tiles=[(1, 2), (3, 4)]))
        assert not result.ok
        assert has_error(result, "2 cells but 2 dominoes (need 4 cells)")

    @pytest.mark.parametrize("tile", [(7, 1), (-1, 3)])
    def test_pip_out_of_range(self, tile):
        result = validate(make_puzzle([(0, 0), (0, 1)], tiles=[tile]))
        assert not result.ok
        assert has_error(result, "outside [0, 6]")

    def test_non_integer_pip_is_reported_not_raised(self):
        """A bad pip is an error; the sum diagnostics skip that domino."""
        coords = [(0, 0), (0, 1)]
        puzzle = make_puzzle(coords, regions=[region("a", coords, ConstraintType.SUM, 4)], tiles=[(None, 4)])
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "Domino d0 has pip value None")
        assert not has_warning(result, "dominoes carry")

    def test_errors_accumulate(self):
        """Several failures are all reported, not just the first."""
        result = validate(make_puzzle([(0, 0), (0, 1), (0, 2)], tiles=[(9, 9), (1, 1)]))
        assert has_error(result, "odd cell count")
        assert has_error(result, "Cell/domino mismatch")
        assert has_error(result, "pip value 9")


# ============================================================================
# Region checks
# ============================================================================

class TestRegionChecks:
    """Check 6-7: region geometry and unassigned cells."""

    def test_empty_region_is_a_warning(self):
        puzzle = make_puzzle([(0, 0), (0, 1)], regions=[region("a", [(0, 0), (0, 1)]), region("b", [])])
        result = validate(puzzle)
        assert result.ok
        assert has_warning(result, "Region b has no cells")

    def test_region_duplicate_cell(self):
        puzzle = make_puzzle([(0, 0), (0, 1)], regions=[region("a", [(0, 0), (0, 0), (0, 1)])])
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "Region a lists cell (0, 0) more than once")

    def test_region_cell_off_board(self):
        puzzle = make_puzzle([(0, 0), (0, 1)], regions=[region("a", [(0, 0), (0, 1), (0, 2)])])
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "(0, 2) which is not a valid board cell")

    def test_overlapping_regions(self):
        puzzle = make_puzzle(
            [(0, 0), (0, 1)],
            regions=[region("a", [(0, 0), (0, 1)]), region("b", [(0, 1)])],
        )
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "Cell (0, 1) belongs to both region a and region b")

    def test_region_split_across_islands(self):
        """Two separate 2-cell islands, one domino each, one 'different' region over both."""
        puzzle = make_puzzle(
            [(0, 0), (0, 1), (2, 0), (2, 1)],
            regions=[region("r", [(0, 0), (0, 1), (2, 0), (2, 1)], ConstraintType.DIFFERENT)],
            tiles=[(1, 2), (3, 4)],
        )
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "Region r is not contiguous")
        assert not has_error(result, "Island")

    def test_unassigned_cells_warn(self):
        puzzle = make_puzzle([(0, 0), (0, 1)], regions=[region("a", [(0, 0)])])
        result = validate(puzzle)
        assert result.ok
        assert has_warning(result, "1 cell(s) belong to no region")

    def test_duplicate_region_ids_warn(self):
        puzzle = make_puzzle(
            [(0, 0), (0, 1)],
            regions=[region("a", [(0, 0)]), region("a", [(0, 1)])],
        )
        assert has_warning(validate(puzzle), "Region id 'a' is used by more than one region")


# ============================================================================
# Island parity
# ============================================================================

class TestIslandParity:
    """Check 8: every island needs an even, checkerboard-balanced cell count."""

    def test_odd_island(self):
        # 3 + 1 cells: even overall, but both islands are odd
        puzzle = make_puzzle([(0, 0), (0, 1), (0, 2), (5, 5)])
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "Island 1 starting at (0, 0) has an odd cell count (3)")
        assert has_error(result, "Island 2 starting at (5, 5) has an odd cell count (1)")

    def test_unbalanced_island(self):
        # T-tetromino: 3 light cells, 1 dark cell
        puzzle = make_puzzle([(0, 0), (0, 1), (0, 2), (1, 1)])
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "unbalanced: 3 light vs 1 dark")

    def test_balanced_island(self):
        # L-tetromino is balanced
        assert validate(make_puzzle([(0, 0), (1, 0), (2, 0), (2, 1)])).ok


# ============================================================================
# Constraint range checks
# ============================================================================

class TestConstraintRanges:
    """Check 9 plus missing values and unknown types."""

    PAIR = [(0, 0), (0, 1)]

    @pytest.mark.parametrize("ctype,value,fragment", [
        (ConstraintType.SUM, 13, "can only sum to 0..12"),
        (ConstraintType.SUM, -1, "can only sum to 0..12"),
        (ConstraintType.GREATER, 12, "sum to at most 12"),
        (ConstraintType.LESS, 0, "never negative"),
        (ConstraintType.SUM, None, "without a value"),
        (ConstraintType.LESS, None, "without a value"),
        (ConstraintType.SUM, "5", "non-integer value '5'"),
        (ConstraintType.GREATER, 2.5, "non-integer value 2.5"),
        ("bigger", 3, "unknown constraint type 'bigger'"),
    ])
    def test_impossible_constraints(self, ctype, value, fragment):
        puzzle = make_puzzle(self.PAIR, regions=[region("a", self.PAIR, ctype, value)])
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, fragment)

    @pytest.mark.parametrize("ctype,value", [
        (ConstraintType.SUM, 0),
        (ConstraintType.SUM, 12),
        (ConstraintType.GREATER, 11),
        (ConstraintType.LESS, 1),
    ])
    def test_boundary_constraints_pass(self, ctype, value):
        puzzle = make_puzzle(self.PAIR, regions=[region("a", self.PAIR, ctype, value)], tiles=[(0, 6)])
        assert validate(puzzle).ok

    def test_different_with_too_many_cells(self):
        coords = [(0, c) for c in range(8)]
        puzzle = make_puzzle(coords, regions=[region("a", coords, ConstraintType.DIFFERENT)])
        result = validate(puzzle)
        assert not result.ok
        assert has_error(result, "8 cells but only 7 distinct pip values")


# ============================================================================
# Soft diagnostics
# ============================================================================

class TestDiagnostics:
    """Checks 10-11: warnings that never block solving."""

    def test_two_cell_sum_without_matching_domino(self):
        coords = [(0, 0), (0, 1)]
        puzzle = make_puzzle(coords, regions=[region("a", coords, ConstraintType.SUM, 4)], tiles=[(2, 3)])
        result = validate(puzzle)
        assert result.ok
        assert has_warning(result, "Region a needs sum=4 on 2 adjacent cells")

    def test_sum_regions_disagree_with_pip_total(self):
        puzzle = make_puzzle(
            [(0, 0), (0, 1), (1, 0), (1, 1)],
            regions=[
                region("a", [(0, 0), (0, 1)], ConstraintType.SUM, 5),
                region("b", [(1, 0), (1, 1)], ConstraintType.SUM, 5),
            ],
            tiles=[(2, 3), (4, 4)],
        )
        result = validate(puzzle)
        assert result.ok
        assert has_warning(result, "total 10, but the dominoes carry 13 pips")

    def test_no_pip_total_warning_when_not_all_cells_summed(self):
        puzzle = make_puzzle(
            [(0, 0), (0, 1), (1, 0), (1, 1)],
            regions=[region("a", [(0, 0), (0, 1)], ConstraintType.SUM, 5)],
            tiles=[(2, 3), (4, 4)],
        )
        assert not has_warning(validate(puzzle), "dominoes carry")

    def test_l_shaped_sample(self):
        """The hand-entered L-shaped puzzle has a split region and an unreachable sum."""
        result = validate(l_shaped_puzzle())
        assert not result.ok
        assert result.errors == ["Region region-H is not contiguous (its cells are not edge-connected)"]
        assert has_warning(result, "Region region-C needs sum=1")

    def test_l_shaped_docstring_map_matches_board(self):
        """The drawn map uses '#' for holes and region letters for cells."""
        rows = [line.split() for line in l_shaped_puzzle.__doc__.splitlines()
                if re.fullmatch(r"([A-H#] ){3}[A-H#]", line.strip())]
        assert len(rows) == 8
        drawn = {Cell(r, c): ch for r, row in enumerate(rows) for c, ch in enumerate(row) if ch != "#"}
        puzzle = l_shaped_puzzle()
        assert set(drawn) == set(puzzle.valid_cells)
        for reg in puzzle.regions:
            assert {drawn[c] for c in reg.cells} == {reg.id[-1]}
