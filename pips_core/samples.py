"""
Built-in sample puzzles for demos and tests.
"""

from typing import List, Sequence, Tuple

from .puzzle import Cell, Constraint, ConstraintType, Domino, Puzzle, Region, domino_id

REGION_COLORS = [
    "#E53935",  # red
    "#1E88E5",  # blue
    "#43A047",  # green
    "#FB8C00",  # orange
    "#8E24AA",  # purple
    "#00ACC1",  # cyan
    "#FFB300",  # amber
    "#D81B60",  # magenta
    "#5E35B1",  # indigo
    "#00897B",  # teal
    "#C0CA33",  # lime
    "#6D4C41",  # brown
]


def _cells(coords: Sequence[Tuple[int, int]]) -> List[Cell]:
    return [Cell(r, c) for r, c in coords]


def _dominoes(tiles: Sequence[Tuple[int, int]]) -> List[Domino]:
    return [Domino(id=domino_id(t, i), pips=(t[0], t[1])) for i, t in enumerate(tiles)]


def sample_puzzle() -> Puzzle:
    """4x4 board split into four 2x2 regions: sum 10, equal, different, greater 3."""
    valid_cells = _cells([(r, c) for r in range(4) for c in range(4)])

    regions = [
        Region("region-0", _cells([(0, 0), (0, 1), (1, 0), (1, 1)]),
               Constraint(ConstraintType.SUM, 10), REGION_COLORS[0]),
        Region("region-1", _cells([(0, 2), (0, 3), (1, 2), (1, 3)]),
               Constraint(ConstraintType.EQUAL), REGION_COLORS[1]),
        Region("region-2", _cells([(2, 0), (2, 1), (3, 0), (3, 1)]),
               Constraint(ConstraintType.DIFFERENT), REGION_COLORS[2]),
        Region("region-3", _cells([(2, 2), (2, 3), (3, 2), (3, 3)]),
               Constraint(ConstraintType.GREATER, 3), REGION_COLORS[3]),
    ]

    return Puzzle(
        width=4,
        height=4,
        valid_cells=valid_cells,
        regions=regions,
        available_dominoes=_dominoes([(2, 3), (2, 3), (4, 4), (4, 4), (0, 6), (1, 5), (4, 5), (5, 6)]),
    )


def l_shaped_puzzle() -> Puzzle:
    """
    24-cell L-shaped board, entered by hand from a screenshot.

        A B B B
        A H B B
        A C C D
        A D D D
        H E # #
        F E # #
        F E # #
        G E # #

    Region H is split in two, so validate() rejects it as non-contiguous.
    """
    valid_cells = _cells([(r, c) for r in range(4) for c in range(4)]
                         + [(r, c) for r in range(4, 8) for c in range(2)])

    regions = [
        Region("region-A", _cells([(0, 0), (1, 0), (2, 0), (3, 0)]),
               Constraint(ConstraintType.ANY), REGION_COLORS[0]),
        Region("region-B", _cells([(0, 1), (0, 2), (0, 3), (1, 2), (1, 3)]),
               Constraint(ConstraintType.EQUAL), REGION_COLORS[1]),
        Region("region-C", _cells([(2, 1), (2, 2)]),
               Constraint(ConstraintType.SUM, 1), REGION_COLORS[2]),
        Region("region-D", _cells([(2, 3), (3, 1), (3, 2), (3, 3)]),
               Constraint(ConstraintType.EQUAL), REGION_COLORS[3]),
        Region("region-E", _cells([(4, 1), (5, 1), (6, 1), (7, 1)]),
               Constraint(ConstraintType.EQUAL), REGION_COLORS[4]),
        Region("region-F", _cells([(5, 0), (6, 0)]),
               Constraint(ConstraintType.EQUAL), REGION_COLORS[5]),
        Region("region-G", _cells([(7, 0)]),
               Constraint(ConstraintType.GREATER, 1), REGION_COLORS[6]),
        Region("region-H", _cells([(1, 1), (4, 0)]),
               Constraint(ConstraintType.ANY), REGION_COLORS[7]),
    ]

    return Puzzle(
        width=4,
        height=8,
        valid_cells=valid_cells,
        regions=regions,
        available_dominoes=_dominoes([
            (3, 5), (6, 6), (1, 4), (5, 6),
            (2, 3), (0, 0), (4, 5), (0, 4),
            (1, 2), (2, 3), (2, 5), (2, 6),
        ]),
    )
