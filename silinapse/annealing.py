"""
Simulated annealing driver for silinapse.

Runs a Boltzmann machine through a sequence of temperatures, applying a
fixed number of update ticks at each one. A tick is either a full
sequential sweep or a single randomized unit update that skips the
excluded (clamped) units.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple
import logging
import math
import time

import numpy as np

from .boltzmann import BoltzmannMachine


logger = logging.getLogger(__name__)


class UpdateMode(Enum):
    SEQUENTIAL = "sequential"   # update_all_sequential per tick
    RANDOM = "random"           # update_one_random per tick


def _check_temperature(t: float) -> float:
    t = float(t)
    if math.isnan(t) or t < 0:
        raise ValueError(f"Temperatures must be non-negative numbers, got {t}")
    return t


@dataclass(frozen=True)
class TemperatureSchedule:
    """
    A finite, ordered sequence of temperatures.

    Attributes:
        temperatures: Temperatures in the order they are applied
    """
    temperatures: Tuple[float, ...]

    def __post_init__(self):
        temps = tuple(_check_temperature(t) for t in self.temperatures)
        if not temps:
            raise ValueError("A schedule needs at least one temperature")
        object.__setattr__(self, "temperatures", temps)

    @classmethod
    def constant(cls, temperature: float, steps: int = 1) -> 'TemperatureSchedule':
        _check_steps(steps)
        return cls((temperature,) * steps)

    @classmethod
    def linear(cls, start: float, stop: float, steps: int) -> 'TemperatureSchedule':
        """Evenly spaced temperatures from start to stop, both included."""
        _check_steps(steps)
        return cls(tuple(np.linspace(start, stop, steps)))

    @classmethod
    def geometric(cls, start: float, stop: float, steps: int) -> 'TemperatureSchedule':
        """Temperatures decaying by a constant ratio from start to stop."""
        _check_steps(steps)
        if start <= 0 or stop <= 0:
            raise ValueError("Geometric schedules need strictly positive endpoints")
        return cls(tuple(np.geomspace(start, stop, steps)))

    @classmethod
    def stepped(cls, stages: Sequence[Tuple[int, float]]) -> 'TemperatureSchedule':
        """
        Staircase schedule from (count, temperature) stages.

        Example:
            >>> TemperatureSchedule.stepped([(2, 20), (1, 10)]).temperatures
            (20.0, 20.0, 10.0)
        """
        temps: List[float] = []
        for count, temperature in stages:
            _check_steps(count)
            temps.extend([temperature] * count)
        return cls(tuple(temps))

    def __iter__(self) -> Iterator[float]:
        return iter(self.temperatures)

    def __len__(self) -> int:
        return len(self.temperatures)


def _check_steps(steps: int) -> None:
    if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)):
        raise ValueError(f"Step counts must be integers, got {steps!r}")
    if steps < 1:
        raise ValueError(f"Step counts must be at least 1, got {steps}")


@dataclass
class AnnealConfig:
    """
    Settings for an annealing run.

    Attributes:
        ticks_per_temperature: Updates applied at each temperature
        mode: Whether a tick is a full sweep or one random unit
        excluded: Units never picked in RANDOM mode
        record_energy: Record the machine energy after each temperature
        verbose: Log progress at INFO instead of DEBUG
    """
    ticks_per_temperature: int = 1
    mode: UpdateMode = UpdateMode.SEQUENTIAL
    excluded: Sequence[int] = ()
    record_energy: bool = False
    verbose: bool = False

    def __post_init__(self):
        _check_steps(self.ticks_per_temperature)
        if len(self.excluded) and self.mode is not UpdateMode.RANDOM:
            raise ValueError("Excluded units are only honored in RANDOM mode")


@dataclass
class AnnealResult:
    """
    Outcome of an annealing run.

    Attributes:
        values: Copy of the unit values at the end of the run
        energies: Energy after each temperature (empty unless recorded)
        updates: Number of ticks applied
        elapsed_ms: Wall time of the run
    """
    values: np.ndarray
    energies: List[float] = field(default_factory=list)
    updates: int = 0
    elapsed_ms: float = 0.0

    @property
    def final_energy(self) -> Optional[float]:
        return self.energies[-1] if self.energies else None


def anneal(machine: BoltzmannMachine,
           schedule: TemperatureSchedule,
           config: Optional[AnnealConfig] = None) -> AnnealResult:
    """
    Run the machine through every temperature of the schedule.

    Args:
        machine: The machine to update in place
        schedule: Temperatures to apply, in order
        config: Run settings (defaults to one sequential sweep per temperature)

    Returns:
        AnnealResult with the final values and optional energy trace
    """
    config = config or AnnealConfig()
    level = logging.INFO if config.verbose else logging.DEBUG
    excluded = list(config.excluded)

    start = time.perf_counter()
    energies: List[float] = []
    updates = 0

    for step, temperature in enumerate(schedule):
        for _ in range(config.ticks_per_temperature):
            if config.mode is UpdateMode.SEQUENTIAL:
                machine.update_all_sequential(temperature)
            else:
                machine.update_one_random(temperature, excluded)
            updates += 1

        if config.record_energy:
            energies.append(machine.energy())
        logger.log(level, "step %d/%d: T=%.4g, %d units on",
                   step + 1, len(schedule), temperature,
                   int(np.count_nonzero(machine.values() > 0.5)))

    elapsed = (time.perf_counter() - start) * 1000
    logger.info("Annealed %d units over %d temperatures (%d ticks) in %.2fms",
                machine.size(), len(schedule), updates, elapsed)

    return AnnealResult(
        values=machine.values().copy(),
        energies=energies,
        updates=updates,
        elapsed_ms=elapsed,
    )
