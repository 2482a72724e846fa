"""
Pips puzzle validation and solving engine.

validate() runs structural checks, solve() finds a covering by backtracking,
verify() checks hand-made placements and hint() reads a stored solution.
"""

from .config import PIP_MAX, PIP_MIN, SolverConfig, load_config
from .constraints import check_region, satisfies
from .hints import hint, next_step, reveal_step
from .puzzle import (
    Cell,
    Constraint,
    ConstraintType,
    Domino,
    Placement,
    Puzzle,
    Region,
    are_adjacent,
    cell_key,
    constraint_label,
    domino_id,
    find_islands,
    parse_cell,
    parse_constraint_label,
)
from .samples import l_shaped_puzzle, sample_puzzle
from .solver import (
    BacktrackingSolver,
    CancellationToken,
    Solution,
    SolveStats,
    solve,
    solve_in_background,
)
from .spec_loader import dump_puzzle, load_puzzle, puzzle_from_dict, puzzle_to_dict
from .validator import ValidationResult, validate
from .verifier import VerificationResult, is_solved, verify

__version__ = "1.0.0"

__all__ = [
    "PIP_MAX",
    "PIP_MIN",
    "SolverConfig",
    "load_config",
    "check_region",
    "satisfies",
    "hint",
    "next_step",
    "reveal_step",
    "Cell",
    "Constraint",
    "ConstraintType",
    "Domino",
    "Placement",
    "Puzzle",
    "Region",
    "are_adjacent",
    "cell_key",
    "constraint_label",
    "domino_id",
    "find_islands",
    "parse_cell",
    "parse_constraint_label",
    "l_shaped_puzzle",
    "sample_puzzle",
    "BacktrackingSolver",
    "CancellationToken",
    "Solution",
    "SolveStats",
    "solve",
    "solve_in_background",
    "dump_puzzle",
    "load_puzzle",
    "puzzle_from_dict",
    "puzzle_to_dict",
    "ValidationResult",
    "validate",
    "VerificationResult",
    "is_solved",
    "verify",
]
