"""
Core data structures for Pips puzzles.

A puzzle is an irregular board of cells (possibly several disconnected
islands), a list of constrained regions and a fixed multiset of dominoes.
All types here are plain values; nothing in the core mutates them.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True, order=True)
class Cell:
    """A board coordinate. Hashable and ordered by (row, col)."""
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True)
class Domino:
    """
    A domino tile.

    ``id`` keeps duplicate tiles apart: two ``[2, 3]`` dominoes are two
    separate resources.
    """
    id: str
    pips: Tuple[int, int]

    @property
    def total(self) -> int:
        return self.pips[0] + self.pips[1]

    def is_double(self) -> bool:
        return self.pips[0] == self.pips[1]

    def __str__(self) -> str:
        return f"[{self.pips[0]},{self.pips[1]}]"


class ConstraintType:
    SUM = "sum"
    EQUAL = "equal"
    DIFFERENT = "different"
    GREATER = "greater"
    LESS = "less"
    ANY = "any"

    ALL = (SUM, EQUAL, DIFFERENT, GREATER, LESS, ANY)
    VALUED = (SUM, GREATER, LESS)


@dataclass(frozen=True)
class Constraint:
    type: str  # one of ConstraintType.ALL
    value: Optional[int] = None  # required for sum, greater, less


ANY_CONSTRAINT = Constraint(type=ConstraintType.ANY)


@dataclass
class Region:
    """A caller-declared group of cells sharing one constraint."""
    id: str
    cells: List[Cell] = field(default_factory=list)
    constraint: Constraint = ANY_CONSTRAINT
    color: Optional[str] = None

    def __repr__(self):
        return f"Region(id={self.id}, size={len(self.cells)}, constraint={constraint_label(self.constraint)})"


@dataclass(frozen=True)
class Placement:
    """
    A domino laid on two cells.

    ``domino.pips[0]`` is on ``cells[0]`` and ``domino.pips[1]`` on
    ``cells[1]``; the orientation is carried by the pip order.
    """
    domino: Domino
    cells: Tuple[Cell, Cell]

    def covers(self, cell: Cell) -> bool:
        return cell == self.cells[0] or cell == self.cells[1]

    def pip_at(self, cell: Cell) -> Optional[int]:
        if cell == self.cells[0]:
            return self.domino.pips[0]
        if cell == self.cells[1]:
            return self.domino.pips[1]
        return None


@dataclass
class Puzzle:
    """
    A complete puzzle description.

    ``width``/``height`` are only the bounding box. ``blocked_cells`` is
    informational; blocked cells are simply absent from ``valid_cells``.
    """
    width: int
    height: int
    valid_cells: List[Cell]
    regions: List[Region]
    available_dominoes: List[Domino]
    blocked_cells: List[Cell] = field(default_factory=list)

    def __repr__(self):
        return (f"Puzzle({self.width}x{self.height}, cells={len(self.valid_cells)}, "
                f"regions={len(self.regions)}, dominoes={len(self.available_dominoes)})")


# =============================================================================
# Keys and labels
# =============================================================================

def cell_key(cell: Cell) -> str:
    return f"{cell.row},{cell.col}"


def parse_cell(key: str) -> Cell:
    """Parse a ``"row,col"`` key back into a Cell."""
    parts = key.split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid cell key: '{key}' (expected 'row,col')")
    return Cell(int(parts[0].strip()), int(parts[1].strip()))


def domino_id(pips: Sequence[int], index: Optional[int] = None) -> str:
    """
    Canonical domino identifier, low pip first.

    Duplicate sets pass ``index`` so that equal tiles get distinct ids,
    e.g. ``domino_id([3, 2], 1) == "2-3-1"``.
    """
    low, high = sorted(pips)
    base = f"{low}-{high}"
    return base if index is None else f"{base}-{index}"


def constraint_label(constraint: Constraint) -> str:
    """Short badge text for a constraint, as printed on the board."""
    ctype = constraint.type
    if ctype == ConstraintType.SUM:
        return f"Σ{constraint.value}"
    if ctype == ConstraintType.EQUAL:
        return "="
    if ctype == ConstraintType.DIFFERENT:
        return "≠"
    if ctype == ConstraintType.GREATER:
        return f">{constraint.value}"
    if ctype == ConstraintType.LESS:
        return f"<{constraint.value}"
    if ctype == ConstraintType.ANY:
        return "*"
    return ""


def parse_constraint_label(text: str) -> Constraint:
    """
    Parse badge text into a Constraint.

    Accepts ``=``, ``≠``/``!=``, ``>N``, ``<N``, ``ΣN``/``N`` (sum) and
    ``*``/``any``.
    """
    text = str(text).strip()

    if text in ("*", "any", ""):
        return ANY_CONSTRAINT
    if text == "=":
        return Constraint(ConstraintType.EQUAL)
    if text in ("≠", "!="):
        return Constraint(ConstraintType.DIFFERENT)
    if text.startswith(">"):
        return Constraint(ConstraintType.GREATER, _label_value(text[1:], text))
    if text.startswith("<"):
        return Constraint(ConstraintType.LESS, _label_value(text[1:], text))
    if text.startswith("Σ"):
        return Constraint(ConstraintType.SUM, _label_value(text[1:], text))
    if text.isdigit():
        return Constraint(ConstraintType.SUM, int(text))
    raise ValueError(f"Unknown constraint label: '{text}'")


def _label_value(digits: str, text: str) -> int:
    digits = digits.strip()
    if not digits.isdigit():
        raise ValueError(f"Constraint label '{text}' needs an integer value")
    return int(digits)


# =============================================================================
# Board geometry
# =============================================================================

def are_adjacent(a: Cell, b: Cell) -> bool:
    """True if the two cells share an edge."""
    row_diff = abs(a.row - b.row)
    col_diff = abs(a.col - b.col)
    return (row_diff == 1 and col_diff == 0) or (row_diff == 0 and col_diff == 1)


def neighbors(cell: Cell) -> List[Cell]:
    """Edge neighbors in fixed order: up, down, left, right."""
    r, c = cell.row, cell.col
    return [Cell(r - 1, c), Cell(r + 1, c), Cell(r, c - 1), Cell(r, c + 1)]


def build_adjacency(cells: Iterable[Cell]) -> Dict[Cell, List[Cell]]:
    """Map each cell to its edge neighbors that are also in ``cells``."""
    cell_set = set(cells)
    adj: Dict[Cell, List[Cell]] = {}
    for cell in cell_set:
        adj[cell] = [n for n in neighbors(cell) if n in cell_set]
    return adj


def find_islands(cells: Sequence[Cell]) -> List[List[Cell]]:
    """
    Connected components of ``cells`` under edge adjacency.

    Breadth-first flood fill, seeded in input order, so the result is a
    reproducible function of the input sequence.
    """
    cell_set = set(cells)
    visited = set()
    islands: List[List[Cell]] = []

    for start in cells:
        if start in visited:
            continue
        island: List[Cell] = []
        queue = deque([start])
        visited.add(start)
        while queue:
            cell = queue.popleft()
            island.append(cell)
            for n in neighbors(cell):
                if n in cell_set and n not in visited:
                    visited.add(n)
                    queue.append(n)
        islands.append(island)

    return islands


def is_contiguous(cells: Sequence[Cell]) -> bool:
    """True if ``cells`` form a single edge-connected group (empty counts as contiguous)."""
    unique = list(dict.fromkeys(cells))
    if not unique:
        return True
    return len(find_islands(unique)) == 1


def pips_by_cell(placements: Iterable[Placement]) -> Dict[Cell, int]:
    """Pip value on each covered cell; on overlap the first placement wins."""
    out: Dict[Cell, int] = {}
    for placement in placements:
        for cell, pip in zip(placement.cells, placement.domino.pips):
            if cell not in out:
                out[cell] = pip
    return out
