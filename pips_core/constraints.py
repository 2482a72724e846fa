"""
Constraint evaluation for Pips regions.

``sum``, ``greater`` and ``less`` are measured on the total of the whole
region, not per domino. Partial checks prune only when no completion can
succeed: ``greater`` never prunes early (more pips only raise the total)
while ``less`` fails as soon as the running total reaches the bound.
"""

from typing import Dict, List, Sequence, Tuple

from .config import PIP_MAX
from .puzzle import Cell, Constraint, ConstraintType, Region


def satisfies(constraint: Constraint, pips: Sequence[int], complete: bool) -> bool:
    """
    Check a set of pip values against a constraint.

    Args:
        constraint: Region constraint
        pips: Pip values placed in the region so far
        complete: True when ``pips`` covers every cell of the region

    Returns:
        True if the constraint holds (complete) or can still hold (partial)
    """
    if not pips:
        return True

    ctype = constraint.type
    value = constraint.value

    # A valued constraint without its value is reported by validate()
    if ctype in ConstraintType.VALUED and value is None:
        return True

    if ctype == ConstraintType.SUM:
        total = sum(pips)
        if complete:
            return total == value
        return total <= value

    if ctype == ConstraintType.EQUAL:
        first = pips[0]
        return all(p == first for p in pips)

    if ctype == ConstraintType.DIFFERENT:
        return len(set(pips)) == len(pips)

    if ctype == ConstraintType.GREATER:
        if complete:
            return sum(pips) > value
        return True

    if ctype == ConstraintType.LESS:
        return sum(pips) < value

    # any, and tags we do not know
    return True


def region_pips(region: Region, cell_pips: Dict[Cell, int]) -> Tuple[List[int], bool]:
    """Pips currently on the region's cells, and whether any cell is still empty."""
    pips: List[int] = []
    has_empty = False
    for cell in region.cells:
        pip = cell_pips.get(cell)
        if pip is None:
            has_empty = True
        else:
            pips.append(pip)
    return pips, has_empty


def check_region(region: Region, cell_pips: Dict[Cell, int], partial: bool = False) -> bool:
    """
    Check one region against the current pip assignment.

    A partial check of a region that still has empty cells uses the partial
    rules; once the region is full it is judged by the complete rules. A
    complete check fails while any cell is empty.
    """
    pips, has_empty = region_pips(region, cell_pips)

    if has_empty:
        if not partial:
            return False
        return satisfies(region.constraint, pips, complete=False)

    return satisfies(region.constraint, pips, complete=True)


def max_region_sum(size: int) -> int:
    return PIP_MAX * size
