# solve_pips.py
from __future__ import annotations

import logging
import sys
from typing import Dict, Optional

from dotenv import load_dotenv

from pips_core import (
    Cell,
    Puzzle,
    hint,
    load_config,
    load_puzzle,
    parse_cell,
    solve,
    validate,
)
from pips_core.puzzle import pips_by_cell
from pips_core.spec_loader import describe_constraints

logger = logging.getLogger(__name__)


def render_solution(puzzle: Puzzle, values: Dict[Cell, int]) -> str:
    """Pip grid over the bounding box: '?' for uncovered cells, '#' for holes."""
    cells = set(puzzle.valid_cells)
    height = max([puzzle.height] + [c.row + 1 for c in cells])
    width = max([puzzle.width] + [c.col + 1 for c in cells])
    out_lines = []
    for r in range(height):
        row_chars = []
        for c in range(width):
            cell = Cell(r, c)
            if cell in cells:
                v = values.get(cell)
                row_chars.append(str(v) if v is not None else "?")
            else:
                row_chars.append("#")
        out_lines.append(" ".join(row_chars))
    return "\n".join(out_lines)


def main(argv: Optional[list] = None) -> int:
    import argparse
    ap = argparse.ArgumentParser(description="Validate and solve a Pips puzzle")
    ap.add_argument("yaml_file", help="Path to pips_puzzle.yaml")
    ap.add_argument("--config", help="YAML file with solver settings")
    ap.add_argument("--timeout", type=float, default=None,
                    help="Give up after this many seconds (overrides config)")
    ap.add_argument("--hint", metavar="ROW,COL",
                    help="Also print the domino covering this cell")
    ap.add_argument("--verbose", "-v", action="store_true",
                    help="Enable verbose logging output")
    args = ap.parse_args(argv)

    load_dotenv()

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Invalid config: {e}")
        return 1
    if args.timeout is not None:
        config.timeout_seconds = args.timeout

    log_level = logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        puzzle = load_puzzle(args.yaml_file)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load puzzle: {e}")
        print(f"Could not load puzzle: {e}")
        return 1

    print(f"Loaded {puzzle!r}")
    for line in describe_constraints(puzzle):
        print(f"  {line}")

    result = validate(puzzle)
    for warning in result.warnings:
        print(f"WARNING: {warning}")
    if not result.ok:
        print("INVALID PUZZLE:")
        for error in result.errors:
            print(f"  - {error}")
        return 1

    solution = solve(puzzle, config=config)

    if not solution.is_valid:
        print(f"NO SOLUTION: {solution.error}")
        print("Filled grid (unknowns as '?'):\n")
        print(render_solution(puzzle, {}))
        return 1

    print("SOLVED.\n")
    print("Pip grid:\n")
    print(render_solution(puzzle, pips_by_cell(solution.placements)))
    print(f"\n{solution.stats.nodes} nodes explored in {solution.stats.elapsed_seconds:.3f}s")

    if args.hint:
        try:
            cell = parse_cell(args.hint)
        except ValueError as e:
            print(f"Bad --hint: {e}")
            return 1
        placement = hint(puzzle, solution, cell)
        if placement is None:
            print(f"\nHint: no domino covers {cell}")
        else:
            c1, c2 = placement.cells
            print(f"\nHint: domino {placement.domino.id} goes on {c1}={placement.domino.pips[0]} "
                  f"and {c2}={placement.domino.pips[1]}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
