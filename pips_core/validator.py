"""
Structural and arithmetic pre-checks for a puzzle.

validate() never searches for a tiling. It collects every hard error and
soft warning it can find so that a caller can show them all at once; the
solver should only run when ``ok`` is True.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set

from .config import DISTINCT_PIP_VALUES, PIP_MAX, PIP_MIN
from .constraints import max_region_sum
from .puzzle import (
    Cell,
    ConstraintType,
    Domino,
    Puzzle,
    Region,
    are_adjacent,
    constraint_label,
    find_islands,
    is_contiguous,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validate(). Warnings never make ``ok`` False."""
    ok: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def summary(self) -> str:
        status = "OK" if self.ok else "INVALID"
        return f"{status}: {len(self.errors)} error(s), {len(self.warnings)} warning(s)"


def validate(puzzle: Puzzle) -> ValidationResult:
    """
    Validate a puzzle description.

    Args:
        puzzle: Puzzle to check, typically straight from an extraction step

    Returns:
        ValidationResult with all hard errors and warnings
    """
    errors: List[str] = []
    warnings: List[str] = []

    cells = puzzle.valid_cells
    unique_cells = list(dict.fromkeys(cells))
    cell_set: Set[Cell] = set(unique_cells)

    # 1-2. Board cells
    if not cells:
        errors.append("Puzzle has no valid cells")

    duplicates = [c for c, n in Counter(cells).items() if n > 1]
    for cell in duplicates:
        errors.append(f"Cell {cell} is listed more than once")

    # 3-4. Counts
    n_cells = len(unique_cells)
    n_dominoes = len(puzzle.available_dominoes)
    if n_cells % 2 != 0:
        errors.append(f"Puzzle has an odd cell count ({n_cells}); dominoes cover cells in pairs")
    if n_cells != 2 * n_dominoes:
        errors.append(
            f"Cell/domino mismatch: {n_cells} cells but {n_dominoes} dominoes "
            f"(need {2 * n_dominoes} cells)"
        )

    # 5. Domino pips
    well_formed: List[Domino] = []
    for domino in puzzle.available_dominoes:
        if len(domino.pips) != 2:
            errors.append(f"Domino {domino.id} must have exactly 2 pip values, got {len(domino.pips)}")
            continue
        bad = [pip for pip in domino.pips if not isinstance(pip, int) or pip < PIP_MIN or pip > PIP_MAX]
        for pip in bad:
            errors.append(f"Domino {domino.id} has pip value {pip} outside [{PIP_MIN}, {PIP_MAX}]")
        if not bad:
            well_formed.append(domino)

    # 6. Region geometry
    owner: Dict[Cell, str] = {}
    seen_ids: Set[str] = set()
    for region in puzzle.regions:
        if region.id in seen_ids:
            warnings.append(f"Region id '{region.id}' is used by more than one region")
        seen_ids.add(region.id)
        _check_region_geometry(region, cell_set, owner, errors, warnings)

    # 7. Unassigned cells go to the implicit catch-all region
    unassigned = [c for c in unique_cells if c not in owner]
    if unassigned:
        warnings.append(
            f"{len(unassigned)} cell(s) belong to no region and will be treated as 'any': "
            + " ".join(str(c) for c in unassigned)
        )

    # 8. Per-island parity
    islands = find_islands(unique_cells)
    logger.debug(f"Board has {len(islands)} island(s)")
    for i, island in enumerate(islands, start=1):
        if len(island) % 2 != 0:
            errors.append(
                f"Island {i} starting at {island[0]} has an odd cell count ({len(island)}) "
                f"and cannot be tiled by dominoes"
            )
        even = sum(1 for c in island if (c.row + c.col) % 2 == 0)
        odd = len(island) - even
        if even != odd:
            errors.append(
                f"Island {i} starting at {island[0]} is unbalanced: {even} light vs {odd} dark "
                f"checkerboard cells; every domino covers one of each"
            )

    # 9. Constraint ranges
    for region in puzzle.regions:
        _check_constraint_range(region, errors)

    # 10. Two-cell sum regions with no matching domino
    domino_sums = {d.total for d in well_formed}
    sum_regions = [r for r in puzzle.regions
                   if r.constraint.type == ConstraintType.SUM and isinstance(r.constraint.value, int)]
    for region in sum_regions:
        constraint = region.constraint
        region_cells = list(dict.fromkeys(region.cells))
        if len(region_cells) == 2 and are_adjacent(*region_cells):
            if constraint.value not in domino_sums:
                warnings.append(
                    f"Region {region.id} needs sum={constraint.value} on 2 adjacent cells, "
                    f"but no domino has that pip sum"
                )

    # 11. Sum regions that tile the whole board must match the domino pip total
    if sum_regions and cell_set and len(well_formed) == n_dominoes:
        sum_cells = {c for r in sum_regions for c in r.cells}
        if cell_set <= sum_cells:
            target_total = sum(r.constraint.value for r in sum_regions)
            pip_total = sum(d.total for d in well_formed)
            if target_total != pip_total:
                warnings.append(
                    f"Sum constraints cover every cell and total {target_total}, "
                    f"but the dominoes carry {pip_total} pips"
                )

    result = ValidationResult(ok=not errors, errors=errors, warnings=warnings)
    logger.debug(f"Validation {result.summary()}")
    return result


def _check_region_geometry(
    region: Region,
    cell_set: Set[Cell],
    owner: Dict[Cell, str],
    errors: List[str],
    warnings: List[str],
) -> None:
    if not region.cells:
        warnings.append(f"Region {region.id} has no cells")
        return

    counts = Counter(region.cells)
    for cell, n in counts.items():
        if n > 1:
            errors.append(f"Region {region.id} lists cell {cell} more than once")

    for cell in counts:
        if cell not in cell_set:
            errors.append(f"Region {region.id} contains cell {cell} which is not a valid board cell")
        if cell in owner:
            errors.append(f"Cell {cell} belongs to both region {owner[cell]} and region {region.id}")
        else:
            owner[cell] = region.id

    if not is_contiguous(list(counts)):
        errors.append(f"Region {region.id} is not contiguous (its cells are not edge-connected)")


def _check_constraint_range(region: Region, errors: List[str]) -> None:
    constraint = region.constraint
    ctype = constraint.type
    size = len(set(region.cells))
    label = constraint_label(constraint)

    if ctype not in ConstraintType.ALL:
        errors.append(f"Region {region.id} has unknown constraint type '{ctype}'")
        return

    if ctype in ConstraintType.VALUED and constraint.value is None:
        errors.append(f"Region {region.id} has a '{ctype}' constraint without a value")
        return

    if ctype in ConstraintType.VALUED and (
        not isinstance(constraint.value, int) or isinstance(constraint.value, bool)
    ):
        errors.append(
            f"Region {region.id} has a '{ctype}' constraint with non-integer value {constraint.value!r}"
        )
        return

    if size == 0:
        return

    max_sum = max_region_sum(size)

    if ctype == ConstraintType.SUM and not (0 <= constraint.value <= max_sum):
        errors.append(
            f"Region {region.id} ({label}) is impossible: {size} cell(s) can only sum to 0..{max_sum}"
        )
    elif ctype == ConstraintType.DIFFERENT and size > DISTINCT_PIP_VALUES:
        errors.append(
            f"Region {region.id} ({label}) is impossible: {size} cells but only "
            f"{DISTINCT_PIP_VALUES} distinct pip values"
        )
    elif ctype == ConstraintType.GREATER and constraint.value >= max_sum:
        errors.append(
            f"Region {region.id} ({label}) is impossible: {size} cell(s) sum to at most {max_sum}"
        )
    elif ctype == ConstraintType.LESS and constraint.value <= 0:
        errors.append(f"Region {region.id} ({label}) is impossible: pip sums are never negative")
