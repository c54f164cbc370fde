"""
Sudoku encoding for silinapse Boltzmann machines.

A 9x9 grid becomes 729 units: 81 groups of 9, one group per cell and one
unit per candidate digit. Pairs of units that must not be on together get
a strong negative coupling:

    - two digits of the same cell
    - the same digit twice in a row, a column or a 3x3 box

Every unit gets the same positive bias, so the lowest-energy states switch
on exactly one digit per cell without conflicts. Given cells are clamped
and excluded from the randomized updates.

QUICK START:
    from silinapse.sudoku import parse_grid, format_grid, solve
    from silinapse.annealing import TemperatureSchedule

    grid = parse_grid(text)
    result = solve(grid, TemperatureSchedule.geometric(60, 0.5, 40), rng=0)
    print(format_grid(result.grid))
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

import numpy as np

from .annealing import AnnealConfig, AnnealResult, TemperatureSchedule, UpdateMode, anneal
from .boltzmann import BoltzmannMachine, RandomSource
from .symmetric import SymmetricMatrix


logger = logging.getLogger(__name__)

SIDE = 9
BOX = 3
NUM_UNITS = SIDE * SIDE * SIDE

PENALTY = -100.0
BIAS = 10.0

# decode() marks a cell with more than one digit on
CONFLICT = 10

Grid = List[List[int]]


def unit(row: int, col: int, digit: int) -> int:
    """Index of the unit meaning "digit (1-9) is at (row, col)"."""
    return (row * SIDE + col) * SIDE + (digit - 1)


def _check_grid(grid: Sequence[Sequence[int]]) -> None:
    if len(grid) != SIDE or any(len(row) != SIDE for row in grid):
        raise ValueError("A sudoku grid must be 9 rows of 9 cells")
    for row in grid:
        for v in row:
            if not 0 <= v <= SIDE:
                raise ValueError(f"Cell values must be 0 (empty) or 1-9, got {v}")


def generate_links(penalty: float = PENALTY) -> SymmetricMatrix:
    """Weight matrix coupling every pair of mutually exclusive units."""
    matrix = SymmetricMatrix.zeros(NUM_UNITS)
    for r in range(SIDE):
        for c in range(SIDE):
            # One digit per cell
            for d1 in range(1, SIDE + 1):
                for d2 in range(1, d1):
                    matrix[unit(r, c, d1), unit(r, c, d2)] = penalty

            # Each digit once per row, column and box
            br, bc = BOX * (r // BOX), BOX * (c // BOX)
            peers = set()
            peers.update((r, c2) for c2 in range(SIDE))
            peers.update((r2, c) for r2 in range(SIDE))
            peers.update((br + i, bc + j) for i in range(BOX) for j in range(BOX))
            peers.discard((r, c))
            for r2, c2 in peers:
                for d in range(1, SIDE + 1):
                    matrix[unit(r, c, d), unit(r2, c2, d)] = penalty
    return matrix


def fixed_units(grid: Sequence[Sequence[int]]) -> List[int]:
    """All units of the given (non-empty) cells."""
    _check_grid(grid)
    fixed = []
    for r in range(SIDE):
        for c in range(SIDE):
            if grid[r][c]:
                fixed.extend(unit(r, c, d) for d in range(1, SIDE + 1))
    return fixed


def clamp(machine: BoltzmannMachine, grid: Sequence[Sequence[int]]) -> None:
    """Switch every unit off, then one-hot the given cells."""
    _check_grid(grid)
    if machine.size() != NUM_UNITS:
        raise ValueError(f"Expected a machine of {NUM_UNITS} units, got {machine.size()}")
    values = machine.values_mut()
    values[:] = 0.0
    for r in range(SIDE):
        for c in range(SIDE):
            if grid[r][c]:
                values[unit(r, c, grid[r][c])] = 1.0


def decode(values: Sequence[float]) -> Grid:
    """
    Read a grid back from unit values.

    A cell is 0 when none of its units is on, CONFLICT when several are,
    and the digit otherwise.
    """
    values = np.asarray(values)
    if values.shape != (NUM_UNITS,):
        raise ValueError(f"Expected {NUM_UNITS} values, got {values.size}")
    on = values.reshape(SIDE, SIDE, SIDE) > 0.5
    grid = []
    for r in range(SIDE):
        row = []
        for c in range(SIDE):
            digits = np.flatnonzero(on[r, c])
            if len(digits) == 0:
                row.append(0)
            elif len(digits) > 1:
                row.append(CONFLICT)
            else:
                row.append(int(digits[0]) + 1)
        grid.append(row)
    return grid


def count_conflicts(grid: Sequence[Sequence[int]]) -> int:
    """Number of empty, over-filled, or duplicated cells in a decoded grid."""
    bad = set()
    for r in range(SIDE):
        for c in range(SIDE):
            if grid[r][c] == 0 or grid[r][c] == CONFLICT:
                bad.add((r, c))
    groups = [[(r, c) for c in range(SIDE)] for r in range(SIDE)]
    groups += [[(r, c) for r in range(SIDE)] for c in range(SIDE)]
    groups += [[(br + i, bc + j) for i in range(BOX) for j in range(BOX)]
               for br in range(0, SIDE, BOX) for bc in range(0, SIDE, BOX)]
    for cells in groups:
        seen = {}
        for r, c in cells:
            v = grid[r][c]
            if 1 <= v <= SIDE:
                if v in seen:
                    bad.add((r, c))
                    bad.add(seen[v])
                else:
                    seen[v] = (r, c)
    return len(bad)


def is_valid_solution(grid: Sequence[Sequence[int]]) -> bool:
    return count_conflicts(grid) == 0


def build_machine(grid: Sequence[Sequence[int]],
                  bias: float = BIAS,
                  penalty: float = PENALTY,
                  rng: RandomSource = None) -> BoltzmannMachine:
    """Encoded machine with the given cells already clamped."""
    machine = BoltzmannMachine.with_biases(generate_links(penalty), [bias] * NUM_UNITS, rng=rng)
    clamp(machine, grid)
    return machine


@dataclass
class SudokuResult:
    """Result of an annealing run on a sudoku."""
    grid: Grid
    conflicts: int
    anneal: AnnealResult

    @property
    def solved(self) -> bool:
        return self.conflicts == 0

    def __str__(self) -> str:
        status = "solved" if self.solved else f"{self.conflicts} conflicting cells"
        return f"Sudoku {status} after {self.anneal.updates} updates ({self.anneal.elapsed_ms:.2f}ms)"


def solve(grid: Sequence[Sequence[int]],
          schedule: Optional[TemperatureSchedule] = None,
          ticks_per_temperature: int = 200,
          rng: RandomSource = None,
          verbose: bool = False) -> SudokuResult:
    """
    Anneal a sudoku with randomized single-unit updates.

    The given cells are clamped and never updated. The run is stochastic
    and is not guaranteed to reach a valid solution.
    """
    if schedule is None:
        schedule = TemperatureSchedule.geometric(60.0, 0.5, 40)
    machine = build_machine(grid, rng=rng)
    fixed = fixed_units(grid)
    if len(fixed) == NUM_UNITS:
        # Nothing left to anneal
        result = AnnealResult(values=machine.values().copy())
    else:
        config = AnnealConfig(
            ticks_per_temperature=ticks_per_temperature,
            mode=UpdateMode.RANDOM,
            excluded=fixed,
            verbose=verbose,
        )
        result = anneal(machine, schedule, config)
    decoded = decode(result.values)
    conflicts = count_conflicts(decoded)
    logger.info("Sudoku annealing finished with %d conflicting cells", conflicts)
    return SudokuResult(grid=decoded, conflicts=conflicts, anneal=result)


def parse_grid(text: str) -> Grid:
    """
    Parse 81 cells from text.

    Digits 1-9 are givens; '0', '_' and '.' are empty cells. Everything
    else (spaces, box-drawing characters) is ignored.
    """
    cells = [0 if ch in "0_." else int(ch) for ch in text if ch in "0123456789_."]
    if len(cells) != SIDE * SIDE:
        raise ValueError(f"Expected 81 cells, found {len(cells)}")
    return [cells[r * SIDE:(r + 1) * SIDE] for r in range(SIDE)]


def format_grid(grid: Sequence[Sequence[int]]) -> str:
    """Render a grid with box separators; empty cells as '_', conflicts as 'X'."""
    line = "+-------+-------+-------+"
    out = [line]
    for r, row in enumerate(grid):
        parts = []
        for c, v in enumerate(row):
            if c % BOX == 0:
                parts.append("|")
            parts.append("_" if v == 0 else "X" if v == CONFLICT else str(v))
        parts.append("|")
        out.append(" ".join(parts))
        if r % BOX == BOX - 1:
            out.append(line)
    return "\n".join(out)
