"""
Backtracking solver for Pips puzzles.

Search state is one mutable pip map plus a used-domino mask; every trial
placement is pushed and undone in place. Ordering is a fixed function of the
input (cell order, up/down/left/right neighbors, domino index order with
two-cell sum matches first) so the same puzzle always yields the same
solution.
"""

import logging
import threading
import time
from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .config import SolverConfig
from .constraints import check_region
from .puzzle import (
    ANY_CONSTRAINT,
    Cell,
    ConstraintType,
    Domino,
    Placement,
    Puzzle,
    Region,
    build_adjacency,
    constraint_label,
    find_islands,
)

logger = logging.getLogger(__name__)

CATCH_ALL_REGION_ID = "unassigned"

NO_SOLUTION_MESSAGE = "No solution found. Check that regions and dominoes are correct."


class SolveCancelled(Exception):
    """Raised inside the search to unwind once cancellation is observed."""


class CancellationToken:
    """
    Cooperative cancel flag for a running solve.

    Safe to set from another thread. An optional timeout turns into a
    deadline measured from construction.
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = None
        self.start_clock(timeout_seconds)

    def start_clock(self, timeout_seconds: Optional[float]) -> None:
        """(Re)set the deadline to ``timeout_seconds`` from now; None clears it."""
        self._deadline = time.monotonic() + timeout_seconds if timeout_seconds else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def timed_out(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.timed_out


@dataclass
class SolveStats:
    nodes: int = 0
    backtracks: int = 0
    pruned: int = 0
    forward_check_prunes: int = 0
    elapsed_seconds: float = 0.0


@dataclass
class Solution:
    """Result of solve(). Failure is data: ``is_valid`` False plus ``error``."""
    placements: List[Placement]
    is_valid: bool
    error: Optional[str] = None
    cancelled: bool = False
    stats: SolveStats = field(default_factory=SolveStats)


class BacktrackingSolver:
    """Depth-first search with MRV cell choice, partial-constraint pruning and forward checking."""

    def __init__(
        self,
        puzzle: Puzzle,
        config: Optional[SolverConfig] = None,
        cancel: Optional[CancellationToken] = None,
    ):
        self.puzzle = puzzle
        self.config = config or SolverConfig()
        self.cancel = cancel or CancellationToken(self.config.timeout_seconds)
        self.stats = SolveStats()

        self.cells: List[Cell] = list(dict.fromkeys(puzzle.valid_cells))
        self.dominoes: List[Domino] = list(puzzle.available_dominoes)
        self.adjacency: Dict[Cell, List[Cell]] = build_adjacency(self.cells)
        self.regions: List[Region] = self._regions_with_catch_all()

        self.cell_regions: Dict[Cell, List[Region]] = {c: [] for c in self.cells}
        for region in self.regions:
            for cell in dict.fromkeys(region.cells):
                if cell in self.cell_regions:
                    self.cell_regions[cell].append(region)

        self.two_cell_sums: List[Tuple[List[Cell], int]] = [
            (list(r.cells), r.constraint.value)
            for r in self.regions
            if r.constraint.type == ConstraintType.SUM
            and r.constraint.value is not None
            and len(set(r.cells)) == 2
        ]

        # search state
        self.values: Dict[Cell, Optional[int]] = {c: None for c in self.cells}
        self.used: List[bool] = [False] * len(self.dominoes)
        self.placements: List[Placement] = []

    def _regions_with_catch_all(self) -> List[Region]:
        claimed: Set[Cell] = {c for r in self.puzzle.regions for c in r.cells}
        orphans = [c for c in self.cells if c not in claimed]
        regions = list(self.puzzle.regions)
        if orphans:
            logger.info(f"Found {len(orphans)} unassigned cell(s), treating them as an 'any' region")
            regions.append(Region(id=CATCH_ALL_REGION_ID, cells=orphans, constraint=ANY_CONSTRAINT))
        return regions

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------
    def run(self) -> Solution:
        """Run the search once and package the outcome."""
        start = time.monotonic()
        try:
            found = self._search()
        except SolveCancelled:
            self.stats.elapsed_seconds = time.monotonic() - start
            logger.info(f"Solve cancelled after {self.stats.nodes} nodes")
            return Solution(
                placements=[],
                is_valid=False,
                error=f"Solve cancelled after exploring {self.stats.nodes} nodes",
                cancelled=True,
                stats=self.stats,
            )
        self.stats.elapsed_seconds = time.monotonic() - start

        if found:
            logger.info(
                f"Solution found with {len(self.placements)} placements "
                f"({self.stats.nodes} nodes, {self.stats.elapsed_seconds:.3f}s)"
            )
            return Solution(placements=list(self.placements), is_valid=True, stats=self.stats)

        logger.info(f"No solution found after {self.stats.nodes} nodes")
        self._log_failure_diagnostics()
        return Solution(placements=[], is_valid=False, error=NO_SOLUTION_MESSAGE, stats=self.stats)

    def _search(self) -> bool:
        self.stats.nodes += 1
        if (self.stats.nodes - 1) % self.config.check_interval == 0 and self.cancel.cancelled:
            raise SolveCancelled()

        cell = self._select_cell()
        if cell is None:
            return all(check_region(region, self.values) for region in self.regions)

        options = self._open_neighbors(cell)
        if not options:
            return False

        order = self._domino_order()
        for nb in options:
            tried: Set[Tuple[int, int]] = set()
            for i in order:
                if self.used[i]:
                    continue
                a, b = self.dominoes[i].pips
                # an identical tile already failed from this exact state
                key = (min(a, b), max(a, b))
                if key in tried:
                    continue
                tried.add(key)

                for (va, vb) in [(a, b), (b, a)] if a != b else [(a, b)]:
                    self._place(i, cell, nb, va, vb)
                    if not self._regions_ok(cell, nb):
                        self.stats.pruned += 1
                    elif not self._forward_check(cell, nb):
                        self.stats.forward_check_prunes += 1
                    elif self._search():
                        return True
                    self._undo(i, cell, nb)
                    self.stats.backtracks += 1

        return False

    def _place(self, index: int, cell: Cell, nb: Cell, va: int, vb: int) -> None:
        self.values[cell] = va
        self.values[nb] = vb
        self.used[index] = True
        domino = self.dominoes[index]
        self.placements.append(Placement(Domino(domino.id, (va, vb)), (cell, nb)))

    def _undo(self, index: int, cell: Cell, nb: Cell) -> None:
        self.values[cell] = None
        self.values[nb] = None
        self.used[index] = False
        self.placements.pop()

    # -------------------------------------------------------------------------
    # Heuristics
    # -------------------------------------------------------------------------
    def _open_neighbors(self, cell: Cell) -> List[Cell]:
        return [n for n in self.adjacency[cell] if self.values[n] is None]

    def _select_cell(self) -> Optional[Cell]:
        """MRV: the uncovered cell with fewest uncovered neighbors; a dead cell wins outright."""
        best: Optional[Cell] = None
        best_count = None
        for cell in self.cells:
            if self.values[cell] is not None:
                continue
            count = sum(1 for n in self.adjacency[cell] if self.values[n] is None)
            if count == 0:
                return cell
            if best_count is None or count < best_count:
                best, best_count = cell, count
        return best

    def _domino_order(self) -> List[int]:
        """Unused domino indices, tiles matching a pending two-cell sum first."""
        pending = {
            target for cells, target in self.two_cell_sums
            if all(self.values.get(c) is None for c in cells)
        }
        unused = [i for i in range(len(self.dominoes)) if not self.used[i]]
        if not pending:
            return unused
        return sorted(unused, key=lambda i: 0 if self.dominoes[i].total in pending else 1)

    def _regions_ok(self, cell: Cell, nb: Cell) -> bool:
        touched = list(self.cell_regions[cell])
        for region in self.cell_regions[nb]:
            if not any(region is t for t in touched):
                touched.append(region)
        return all(check_region(region, self.values, partial=True) for region in touched)

    def _forward_check(self, cell: Cell, nb: Cell) -> bool:
        """No uncovered cell next to the new placement may be left without a partner."""
        for x in self.adjacency[cell] + self.adjacency[nb]:
            if self.values[x] is None and not self._open_neighbors(x):
                return False
        return True

    def _log_failure_diagnostics(self) -> None:
        all_pips = sorted(p for d in self.dominoes for p in d.pips)
        counts = Counter(all_pips)
        logger.debug(f"Available pips: {','.join(str(p) for p in all_pips)}")
        logger.debug(f"Pip counts: {' '.join(f'{p}:{n}' for p, n in sorted(counts.items()))}")
        logger.debug(f"Total pip sum: {sum(all_pips)}")
        for region in self.regions:
            if region.constraint.type in (ConstraintType.SUM, ConstraintType.EQUAL, ConstraintType.DIFFERENT):
                logger.debug(
                    f"Region {region.id}: {len(region.cells)} cells need {constraint_label(region.constraint)}"
                )


def solve(
    puzzle: Puzzle,
    config: Optional[SolverConfig] = None,
    cancel: Optional[CancellationToken] = None,
) -> Solution:
    """
    Find one covering of the puzzle that satisfies every region.

    Expects validate() to have passed, but never raises: count mismatches,
    exhausted searches, cancellation and unexpected faults all come back as
    a Solution with ``is_valid`` False.

    Args:
        puzzle: Puzzle to solve
        config: Search settings (defaults to SolverConfig())
        cancel: Token another thread may use to stop the search

    Returns:
        Solution
    """
    try:
        n_cells = len(set(puzzle.valid_cells))
        n_dominoes = len(puzzle.available_dominoes)
        logger.info(
            f"Starting solve: {n_cells} cells, {n_dominoes} dominoes, {len(puzzle.regions)} regions"
        )

        islands = find_islands(list(dict.fromkeys(puzzle.valid_cells)))
        logger.debug(f"Found {len(islands)} island(s)")
        for i, island in enumerate(islands, start=1):
            logger.debug(f"  Island {i}: {len(island)} cells - {' '.join(str(c) for c in island)}")
        logger.debug(f"Dominoes: {' '.join(str(d) for d in puzzle.available_dominoes)}")

        # spare dominoes may stay unused; only a shortage is rejected up front
        if n_cells > 2 * n_dominoes:
            logger.info("Not enough dominoes, not searching")
            return Solution(
                placements=[],
                is_valid=False,
                error=(f"Invalid puzzle: {n_cells} cells but {n_dominoes} dominoes "
                       f"(need at least {(n_cells + 1) // 2})"),
            )

        return BacktrackingSolver(puzzle, config=config, cancel=cancel).run()

    except Exception as e:
        logger.exception("Solver error")
        return Solution(placements=[], is_valid=False, error=f"Solver error: {e}")


_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _default_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pips-solver")
        return _executor


def solve_in_background(
    puzzle: Puzzle,
    config: Optional[SolverConfig] = None,
    executor: Optional[ThreadPoolExecutor] = None,
) -> Tuple["Future[Solution]", CancellationToken]:
    """
    Run solve() on a worker thread.

    The timeout clock starts when a worker picks the job up, so time spent
    queued behind another solve on the shared pool does not count against it.

    Returns:
        (future, token): the future resolves to a Solution; ``token.cancel()``
        stops the search at its next check and the future then resolves to a
        cancelled Solution.
    """
    config = config or SolverConfig()
    token = CancellationToken()
    pool = executor or _default_executor()
    future = pool.submit(_solve_on_worker, puzzle, config, token)
    return future, token


def _solve_on_worker(puzzle: Puzzle, config: SolverConfig, token: CancellationToken) -> Solution:
    token.start_clock(config.timeout_seconds)
    return solve(puzzle, config=config, cancel=token)
