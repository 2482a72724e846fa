"""
Checks for a hand-placed, possibly incomplete set of dominoes.

Runs on every edit while a user places tiles, so it reports problems as a
list of messages and never raises on bad input.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Set

from .constraints import check_region, region_pips, satisfies
from .puzzle import Cell, Placement, Puzzle, are_adjacent, constraint_label, pips_by_cell

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def verify(puzzle: Puzzle, placements: Sequence[Placement]) -> VerificationResult:
    """
    Verify placements against overlap, adjacency and region rules.

    Region rules use the partial checks only, so an unfinished board is not
    an error. A finished ``greater`` region below its bound is therefore not
    reported here; is_solved() catches it.

    Args:
        puzzle: The puzzle being played
        placements: Current placements, in the order the user made them

    Returns:
        VerificationResult with every violation found
    """
    errors: List[str] = []
    board: Set[Cell] = set(puzzle.valid_cells)

    used: Set[Cell] = set()
    for placement in placements:
        for cell in placement.cells:
            if cell in used:
                errors.append(f"Cell {cell} used by multiple dominoes")
            used.add(cell)

    for placement in placements:
        c1, c2 = placement.cells
        if not are_adjacent(c1, c2):
            errors.append(f"Domino cells {c1} and {c2} are not adjacent")
        for cell in (c1, c2):
            if cell not in board:
                errors.append(f"Cell {cell} is not on the board")

    cell_pips = pips_by_cell(placements)
    for region in puzzle.regions:
        pips, _ = region_pips(region, cell_pips)
        if not satisfies(region.constraint, pips, complete=False):
            errors.append(f"Region {region.id} constraint violated: {constraint_label(region.constraint)}")

    if errors:
        logger.debug(f"Verification found {len(errors)} problem(s)")
    return VerificationResult(valid=not errors, errors=errors)


def is_solved(puzzle: Puzzle, placements: Sequence[Placement]) -> bool:
    """True when the placements cover every cell, verify cleanly and satisfy every region in full."""
    if not verify(puzzle, placements).valid:
        return False

    cell_pips = pips_by_cell(placements)
    if any(cell not in cell_pips for cell in puzzle.valid_cells):
        return False

    return all(check_region(region, cell_pips) for region in puzzle.regions)
