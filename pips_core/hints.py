"""
Hints served from a previously computed solution.

Nothing here searches: every function reads a stored Solution, which lets
the UI reveal a cell, or the next few dominoes, without re-solving.
"""

from typing import FrozenSet, List, Optional, Sequence, Tuple

from .puzzle import Cell, Placement, Puzzle
from .solver import Solution


def hint(puzzle: Puzzle, solution: Optional[Solution], cell: Cell) -> Optional[Placement]:
    """
    Return the placement that covers ``cell`` in ``solution``.

    Args:
        puzzle: The puzzle the solution belongs to
        solution: Stored solution; may be None or incomplete
        cell: Cell the user asked about

    Returns:
        The covering Placement, or None if no placement touches the cell
    """
    if solution is None:
        return None
    for placement in solution.placements:
        if placement.covers(cell):
            return placement
    return None


def reveal_step(solution: Optional[Solution], step_index: int) -> List[Placement]:
    """First ``step_index`` placements of the solution, for step-by-step reveal."""
    if solution is None:
        return []
    step_index = max(0, min(step_index, len(solution.placements)))
    return list(solution.placements[:step_index])


def next_step(solution: Optional[Solution], placements: Sequence[Placement]) -> Optional[Placement]:
    """The first solution placement the user has not made yet."""
    if solution is None:
        return None
    made = {_layout(p) for p in placements}
    for placement in solution.placements:
        if _layout(placement) not in made:
            return placement
    return None


def _layout(placement: Placement) -> FrozenSet[Tuple[Cell, int]]:
    # duplicate tiles are interchangeable on the board, so compare cells and pips only
    return frozenset(zip(placement.cells, placement.domino.pips))
