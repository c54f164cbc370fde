"""
silinapse: a library of silicon synapses

Stochastic neural-network building blocks:

- SymmetricMatrix stores pairwise couplings in n*(n+1)/2 slots, with
  (i, j) and (j, i) sharing the same slot.
- BoltzmannMachine holds unit values and biases over such a matrix and
  resamples units with the logistic rule P(on) = 1 / (1 + exp(-field / T)).
- anneal() drives a machine through a temperature schedule.
- The sudoku module encodes a 9x9 sudoku as a 729-unit machine.
"""

from .symmetric import SymmetricMatrix, packed_size
from .boltzmann import (
    BoltzmannMachine,
    ExclusionError,
    logistic_acceptance,
    make_rng,
)
from .annealing import (
    AnnealConfig,
    AnnealResult,
    TemperatureSchedule,
    UpdateMode,
    anneal,
)

__version__ = "0.1.0"
__all__ = [
    # Core data structures
    "SymmetricMatrix",
    "packed_size",
    # Boltzmann machine
    "BoltzmannMachine",
    "ExclusionError",
    "logistic_acceptance",
    "make_rng",
    # Annealing
    "AnnealConfig",
    "AnnealResult",
    "TemperatureSchedule",
    "UpdateMode",
    "anneal",
]
