"""
YAML puzzle specifications.

A specification draws the board as two ASCII maps of the same size: the
shape (``.`` cell, ``#`` hole) and the region labels, one character per
cell. Constraints are keyed by region label.

    dominoes:
      tiles: [[2, 3], [4, 4]]
    board:
      shape: |
        ..
        ..
      regions: |
        AA
        AB
    region_constraints:
      A: {type: sum, value: 10}
      B: "*"
"""

import logging
import string
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from .config import PIP_MAX, PIP_MIN
from .puzzle import (
    Cell,
    Constraint,
    ConstraintType,
    Domino,
    Puzzle,
    Region,
    constraint_label,
    domino_id,
    parse_constraint_label,
)

logger = logging.getLogger(__name__)

# Region map characters that leave a valid cell unassigned
UNASSIGNED_LABELS = ("#", ".", " ")

# Older specs spell comparisons as sum + op
_LEGACY_SUM_OPS = {
    "==": ConstraintType.SUM,
    "<": ConstraintType.LESS,
    ">": ConstraintType.GREATER,
}


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{what} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{what} must be an integer, got {value!r}") from None


def _map_lines(block: Union[str, List[str]]) -> List[str]:
    if isinstance(block, str):
        lines = block.splitlines()
    elif isinstance(block, list):
        lines = [str(line) for line in block]
    else:
        raise ValueError(f"Board map must be a block of text or a list of lines, got {type(block).__name__}")
    return [line.rstrip("\n") for line in lines if line.strip() != ""]


def parse_ascii_maps(shape: Union[str, List[str]], regions: Union[str, List[str]]) -> Tuple[List[Cell], Dict[Cell, str]]:
    """
    Read the shape and region maps.

    Returns:
        (cells, cell_region): valid cells in row-major order, and the region
        label of every assigned cell

    Raises:
        ValueError: On mismatched map sizes or unknown shape characters
    """
    shape_lines = _map_lines(shape)
    region_lines = _map_lines(regions)
    if len(shape_lines) != len(region_lines):
        raise ValueError("shape and regions must have same number of lines")

    cells: List[Cell] = []
    cell_region: Dict[Cell, str] = {}

    for r, (sline, rline) in enumerate(zip(shape_lines, region_lines)):
        if len(sline) != len(rline):
            raise ValueError(f"Line length mismatch at row {r}: shape vs regions")
        for c, (ch_s, ch_r) in enumerate(zip(sline, rline)):
            if ch_s == ".":
                cells.append(Cell(r, c))
                if ch_r not in UNASSIGNED_LABELS:
                    cell_region[Cell(r, c)] = ch_r
            elif ch_s == "#":
                continue
            else:
                raise ValueError(f"Invalid char in shape at ({r},{c}): '{ch_s}' (use '.' or '#')")

    return cells, cell_region


def parse_constraint(obj: Any) -> Constraint:
    """Parse a constraint entry: a badge string or a ``{type, value}`` mapping."""
    if not isinstance(obj, dict):
        return parse_constraint_label(obj)

    ctype = obj.get("type")
    if ctype == "all_equal":
        ctype = ConstraintType.EQUAL
    elif ctype == ConstraintType.SUM and "op" in obj:
        op = obj["op"]
        if op not in _LEGACY_SUM_OPS:
            raise ValueError(f"Unsupported sum op: '{op}'")
        ctype = _LEGACY_SUM_OPS[op]

    if ctype not in ConstraintType.ALL:
        raise ValueError(f"Unknown constraint type: {ctype}")

    value = obj.get("value")
    if ctype in ConstraintType.VALUED:
        if value is None:
            raise ValueError(f"Constraint '{ctype}' requires a value")
        value = _as_int(value, f"Constraint '{ctype}' value")
    else:
        value = None

    return Constraint(type=ctype, value=value)


def puzzle_from_dict(data: Dict[str, Any]) -> Puzzle:
    """
    Build a Puzzle from a parsed specification.

    Raises:
        ValueError: If a required field is missing or malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Puzzle specification must be a mapping")

    for required in ("dominoes", "board", "region_constraints"):
        if required not in data:
            raise ValueError(f"Missing required field: {required}")

    pips = data.get("pips")
    if pips:
        if not isinstance(pips, dict):
            raise ValueError(f"'pips' must be a mapping with pip_min/pip_max, got {pips!r}")
        pip_min = _as_int(pips.get("pip_min", PIP_MIN), "pips.pip_min")
        pip_max = _as_int(pips.get("pip_max", PIP_MAX), "pips.pip_max")
        if pip_min != PIP_MIN or pip_max != PIP_MAX:
            logger.warning(f"Ignoring pip range {pips}; pips are always {PIP_MIN}..{PIP_MAX}")

    dom = data["dominoes"]
    if isinstance(dom, dict):
        if "tiles" not in dom:
            raise ValueError("Missing required field: dominoes.tiles")
        tiles = dom["tiles"]
    else:
        tiles = dom
    if not isinstance(tiles, list):
        raise ValueError(f"Domino tiles must be a list of pairs, got {tiles!r}")
    dominoes: List[Domino] = []
    for i, tile in enumerate(tiles):
        if not isinstance(tile, (list, tuple)) or len(tile) != 2:
            raise ValueError(f"Domino {i} must have exactly 2 pip values: {tile}")
        pair = (_as_int(tile[0], f"Domino {i} pip"), _as_int(tile[1], f"Domino {i} pip"))
        dominoes.append(Domino(id=domino_id(pair, i), pips=pair))

    board = data["board"]
    if not isinstance(board, dict) or "shape" not in board or "regions" not in board:
        raise ValueError("Missing board shape or regions")
    cells, cell_region = parse_ascii_maps(board["shape"], board["regions"])
    shape_lines = _map_lines(board["shape"])

    constraints_raw = data["region_constraints"] or {}
    if not isinstance(constraints_raw, dict):
        raise ValueError(
            f"region_constraints must map region labels to constraints, got {type(constraints_raw).__name__}"
        )
    constraints = {str(rid): parse_constraint(obj) for rid, obj in constraints_raw.items()}

    region_map: Dict[str, List[Cell]] = {}
    for cell in cells:
        rid = cell_region.get(cell)
        if rid is not None:
            region_map.setdefault(rid, []).append(cell)

    for rid in region_map:
        if rid not in constraints:
            raise ValueError(f"Region '{rid}' appears in board but missing from region_constraints")

    regions = [Region(id=rid, cells=region_map.get(rid, []), constraint=cons)
               for rid, cons in constraints.items()]

    blocked = [Cell(r, c)
               for r, line in enumerate(shape_lines)
               for c, ch in enumerate(line) if ch == "#"]

    return Puzzle(
        width=max((len(line) for line in shape_lines), default=0),
        height=len(shape_lines),
        valid_cells=cells,
        regions=regions,
        available_dominoes=dominoes,
        blocked_cells=blocked,
    )


def load_puzzle(path: Union[str, Path]) -> Puzzle:
    """Load a Puzzle from a YAML file."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"YAML syntax error in {path}: {e}") from e
    puzzle = puzzle_from_dict(data)
    logger.debug(f"Loaded {puzzle!r} from {path}")
    return puzzle


def _region_labels(puzzle: Puzzle) -> Dict[str, str]:
    """Single-character map label for every region id."""
    ids = [r.id for r in puzzle.regions]
    if all(len(rid) == 1 and rid not in UNASSIGNED_LABELS for rid in ids) and len(set(ids)) == len(ids):
        return {rid: rid for rid in ids}
    alphabet = string.ascii_uppercase + string.ascii_lowercase + string.digits
    if len(ids) > len(alphabet):
        raise ValueError(f"Too many regions to draw as a map: {len(ids)}")
    return {rid: alphabet[i] for i, rid in enumerate(ids)}


def puzzle_to_dict(puzzle: Puzzle) -> Dict[str, Any]:
    """Inverse of puzzle_from_dict; region ids that are not single characters are relabelled."""
    cell_set = set(puzzle.valid_cells)
    if any(c.row < 0 or c.col < 0 for c in cell_set):
        raise ValueError("Cells with negative coordinates cannot be drawn as a map")

    height = max([puzzle.height] + [c.row + 1 for c in cell_set])
    width = max([puzzle.width] + [c.col + 1 for c in cell_set])

    labels = _region_labels(puzzle)
    label_at: Dict[Cell, str] = {}
    for region in puzzle.regions:
        for cell in region.cells:
            label_at.setdefault(cell, labels[region.id])

    shape_rows = []
    region_rows = []
    for r in range(height):
        shape_rows.append("".join("." if Cell(r, c) in cell_set else "#" for c in range(width)))
        region_rows.append("".join(
            label_at.get(Cell(r, c), ".") if Cell(r, c) in cell_set else "#" for c in range(width)
        ))

    constraints: Dict[str, Any] = {}
    for region in puzzle.regions:
        cons = region.constraint
        entry: Dict[str, Any] = {"type": cons.type}
        if cons.value is not None:
            entry["value"] = cons.value
        constraints[labels[region.id]] = entry

    return {
        "dominoes": {"tiles": [list(d.pips) for d in puzzle.available_dominoes]},
        "board": {
            "shape": "\n".join(shape_rows) + "\n",
            "regions": "\n".join(region_rows) + "\n",
        },
        "region_constraints": constraints,
    }


def dump_puzzle(puzzle: Puzzle) -> str:
    """Serialize a Puzzle to YAML text."""
    return yaml.safe_dump(puzzle_to_dict(puzzle), default_flow_style=None, sort_keys=False, allow_unicode=True)


def describe_constraints(puzzle: Puzzle) -> List[str]:
    """One ``id: label`` line per region, for console output."""
    return [f"{r.id}: {constraint_label(r.constraint)} ({len(r.cells)} cells)" for r in puzzle.regions]
