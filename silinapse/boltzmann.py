"""
Boltzmann machine simulator for silinapse.

A network of binary stochastic units coupled by a packed symmetric weight
matrix. Each update samples a unit's new state from the logistic of its
local field divided by the temperature:

    field_i = b_i + sum_{j != i} x_j * w_ij
    P(x_i = 1) = 1 / (1 + exp(-field_i / T))

High temperatures flatten P towards 0.5; low temperatures sharpen it into
a threshold at field_i = 0.
"""

import logging
import math
from typing import Iterable, Optional, Sequence, Set, Union

import numpy as np

from .symmetric import SymmetricMatrix


logger = logging.getLogger(__name__)

# exp(709) is the last finite float64 power of e.
MAX_EXPONENT = 700.0

RandomSource = Union[None, int, np.random.Generator]


class ExclusionError(ValueError):
    """Raised when every unit is excluded from a randomized update."""


def logistic_acceptance(field: float, temperature: float) -> float:
    """
    Probability that a unit with the given local field switches on.

    At temperature 0 the rule degenerates to a threshold: 1.0 for a
    positive field, 0.0 for a negative one and 0.5 for a zero field.
    """
    if math.isnan(temperature) or temperature < 0:
        raise ValueError(f"Temperature must be a non-negative number, got {temperature}")
    if math.isnan(field):
        raise ValueError("Local field is NaN")
    if temperature == 0:
        if field > 0:
            return 1.0
        if field < 0:
            return 0.0
        return 0.5
    x = field / temperature
    if math.isnan(x):
        # infinite field over infinite temperature
        return 0.5
    x = min(max(x, -MAX_EXPONENT), MAX_EXPONENT)
    return 1.0 / (1.0 + math.exp(-x))


def make_rng(rng: RandomSource = None):
    """
    Normalize a random source.

    Accepts None (fresh entropy), an integer seed, or any object exposing
    `random()` and `integers(low, high)` like numpy.random.Generator.
    """
    if rng is None or isinstance(rng, (int, np.integer)):
        return np.random.default_rng(rng)
    if not (hasattr(rng, "random") and hasattr(rng, "integers")):
        raise ValueError(f"Random source {rng!r} must provide random() and integers()")
    return rng


class BoltzmannMachine:
    """
    Stochastic binary units with symmetric pairwise couplings.

    The machine owns its weights and biases. Only the unit values are
    meant to be mutated from outside, through values_mut() or set_values(),
    e.g. to clamp some units before running randomized updates that
    exclude them.

    Attributes:
        weights: Pairwise couplings, SymmetricMatrix of side n
        biases: Per-unit bias terms, length n
        rng: Random source used for every draw
    """

    def __init__(self,
                 weights: SymmetricMatrix,
                 biases: Optional[Sequence[float]] = None,
                 rng: RandomSource = None):
        n = weights.size()
        if biases is None:
            biases = np.zeros(n, dtype=np.float64)
        else:
            biases = np.array(biases, dtype=np.float64)
            if biases.shape != (n,):
                raise ValueError(f"The biases count ({biases.size}) must be equal "
                                 f"to the nodes count ({n})")
        biases.flags.writeable = False

        self._weights = weights
        self._biases = biases
        self._values = np.ones(n, dtype=np.float64)
        self.rng = make_rng(rng)
        logger.debug("Created Boltzmann machine with %d units", n)

    @classmethod
    def create(cls, weights: SymmetricMatrix, rng: RandomSource = None) -> 'BoltzmannMachine':
        """Machine with every value at 1 and every bias at 0."""
        return cls(weights, rng=rng)

    @classmethod
    def with_biases(cls,
                    weights: SymmetricMatrix,
                    biases: Sequence[float],
                    rng: RandomSource = None) -> 'BoltzmannMachine':
        """Machine with explicit biases; their count must match the unit count."""
        return cls(weights, biases, rng=rng)

    def size(self) -> int:
        return self._weights.size()

    @property
    def weights(self) -> SymmetricMatrix:
        return self._weights

    @property
    def biases(self) -> np.ndarray:
        return self._biases

    def values(self) -> np.ndarray:
        """Read-only view of the unit values."""
        view = self._values.view()
        view.flags.writeable = False
        return view

    def values_mut(self) -> np.ndarray:
        """Writable unit values; changes are seen by the next update."""
        return self._values

    def set_values(self, values: Sequence[float]) -> None:
        """Overwrite every unit value at once."""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self._values.shape:
            raise ValueError(f"Expected {self._values.size} values, got {values.size}")
        self._values[:] = values

    def local_field(self, i: int) -> float:
        """Bias of unit i plus its couplings to every other unit's current value."""
        row = self._weights.row(i)
        others = np.arange(self.size()) != i
        total = self._values[others] @ row[others]
        return float(self._biases[i] + total)

    def acceptance_probability(self, i: int, temperature: float) -> float:
        return logistic_acceptance(self.local_field(i), temperature)

    def update_unit(self, i: int, temperature: float) -> float:
        """
        Resample unit i.

        Draws u uniformly in [0, 1) and switches the unit on iff u < P(on).
        Returns the new value.
        """
        p = self.acceptance_probability(i, temperature)
        value = 1.0 if self.rng.random() < p else 0.0
        self._values[i] = value
        return value

    def update_all_sequential(self, temperature: float) -> None:
        """
        Resample every unit once, in index order.

        Updates are applied in place, so unit i sees the new values of
        units 0..i-1 from the same sweep.
        """
        for i in range(self.size()):
            self.update_unit(i, temperature)

    def update_one_random(self, temperature: float, excluded: Iterable[int] = ()) -> int:
        """
        Resample one unit chosen uniformly among those not in `excluded`.

        Excluded units keep their values but still contribute to the other
        units' local fields. Indices outside [0, n) are ignored.

        Returns:
            Index of the updated unit

        Raises:
            ExclusionError: if no unit is left to choose from
        """
        n = self.size()
        avoid: Set[int] = {int(k) for k in excluded if 0 <= k < n}
        if len(avoid) >= n:
            raise ExclusionError(f"All {n} units are excluded from the update")

        idx = int(self.rng.integers(0, n))
        while idx in avoid:
            idx = int(self.rng.integers(0, n))
        self.update_unit(idx, temperature)
        return idx

    def energy(self) -> float:
        """
        Energy of the current state.

        E(x) = -1/2 * sum_{i != j} w_ij x_i x_j - sum_i b_i x_i

        Self-couplings are left out, matching the local field.
        """
        dense = self._weights.to_dense()
        np.fill_diagonal(dense, 0.0)
        x = self._values
        return float(-0.5 * (x @ dense @ x) - self._biases @ x)

    def __repr__(self) -> str:
        on = int(np.count_nonzero(self._values > 0.5))
        return f"BoltzmannMachine(units={self.size()}, on={on})"
