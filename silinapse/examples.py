"""
Examples demonstrating silinapse usage.

Run with: python -m silinapse.examples
"""

import numpy as np

from silinapse.symmetric import SymmetricMatrix
from silinapse.boltzmann import BoltzmannMachine, logistic_acceptance
from silinapse.annealing import AnnealConfig, TemperatureSchedule, UpdateMode, anneal
from silinapse.sudoku import format_grid, parse_grid, solve


# +-------+-------+-------+
# | 5 _ _ | 8 _ 6 | _ _ 4 |
# | _ _ _ | _ _ _ | 8 _ _ |
# | 8 _ 7 | _ 4 _ | _ 5 _ |
# +-------+-------+-------+
# | _ _ 3 | _ 8 _ | 1 9 _ |
# | _ _ _ | 2 _ 4 | _ _ _ |
# | _ 8 6 | _ 5 _ | 4 _ _ |
# +-------+-------+-------+
# | _ 9 _ | _ 7 _ | 2 _ 8 |
# | _ _ 4 | _ _ _ | _ _ _ |
# | 2 _ _ | 9 _ 1 | _ _ 7 |
# +-------+-------+-------+
EXAMPLE_SUDOKU = """
500806004
000000800
807040050
003080190
000204000
086050400
090070208
004000000
200901007
"""


def example_packed_matrix():
    """Symmetric storage in half the space."""
    print("=" * 60)
    print("Example 1: Packed Symmetric Matrix")
    print("=" * 60)

    matrix = SymmetricMatrix.zeros(4)
    matrix[0, 3] = 2.5
    matrix.set(2, 1, -1.0)

    print(f"Matrix: {matrix}")
    print(f"Slots used: {len(matrix.storage)} (dense would use {matrix.size() ** 2})")
    print(f"w(0,3) = {matrix[0, 3]}, w(3,0) = {matrix[3, 0]}")
    print("Dense view:")
    print(matrix.to_dense())
    print()


def example_inhibition():
    """Two units with a strong inhibitory coupling."""
    print("=" * 60)
    print("Example 2: Inhibition")
    print("=" * 60)

    weights = SymmetricMatrix.zeros(2)
    weights[0, 1] = -100.0
    machine = BoltzmannMachine.with_biases(weights, [10.0, 10.0], rng=42)
    machine.values_mut()[0] = 1.0

    print(f"Local field of unit 1 with unit 0 on: {machine.local_field(1)}")
    off = 0
    trials = 1000
    for _ in range(trials):
        machine.update_one_random(1.0, excluded=[0])
        off += int(machine.values()[1] == 0.0)
    print(f"Unit 1 was off after {off}/{trials} updates")
    print(f"Final values: {machine.values()}, energy: {machine.energy()}")
    print()


def example_temperature():
    """How temperature shapes the acceptance probability."""
    print("=" * 60)
    print("Example 3: Temperature")
    print("=" * 60)

    for temperature in [100.0, 10.0, 1.0, 0.1, 0.0]:
        probs = [logistic_acceptance(field, temperature) for field in (-5.0, 0.0, 5.0)]
        formatted = ", ".join(f"{p:.3f}" for p in probs)
        print(f"T={temperature:6.1f}: P(on | field=-5, 0, 5) = {formatted}")
    print()


def example_annealing():
    """Annealing a small frustrated network."""
    print("=" * 60)
    print("Example 4: Annealing")
    print("=" * 60)

    rng = np.random.default_rng(7)
    n = 12
    weights = SymmetricMatrix.zeros(n)
    for i in range(n):
        for j in range(i):
            weights[i, j] = rng.normal(0.0, 1.0)
    machine = BoltzmannMachine.with_biases(weights, rng.normal(0.0, 0.5, n), rng=rng)

    schedule = TemperatureSchedule.stepped([(5, 20.0), (5, 10.0), (5, 5.0), (5, 2.0), (5, 1.0), (5, 0.5)])
    result = anneal(machine, schedule, AnnealConfig(ticks_per_temperature=4, record_energy=True))

    print(f"Schedule: {len(schedule)} temperatures, {result.updates} sweeps")
    print(f"Energy: {result.energies[0]:.3f} -> {result.final_energy:.3f}")
    print(f"Final state: {result.values.astype(int)}")
    print()


def example_clamped_units():
    """Randomized updates leave excluded units alone."""
    print("=" * 60)
    print("Example 5: Clamped Units")
    print("=" * 60)

    weights = SymmetricMatrix.zeros(5)
    for i in range(4):
        weights[i, i + 1] = 3.0
    machine = BoltzmannMachine.create(weights, rng=3)
    machine.set_values([1.0, 0.0, 0.0, 0.0, 0.0])

    config = AnnealConfig(ticks_per_temperature=50, mode=UpdateMode.RANDOM, excluded=[0])
    result = anneal(machine, TemperatureSchedule.geometric(5.0, 0.1, 10), config)
    print(f"Unit 0 clamped on, final values: {result.values.astype(int)}")
    print()


def example_sudoku():
    """Annealing a sudoku encoded as 729 units."""
    print("=" * 60)
    print("Example 6: Sudoku")
    print("=" * 60)

    grid = parse_grid(EXAMPLE_SUDOKU)
    print(format_grid(grid))

    result = solve(grid, TemperatureSchedule.geometric(60.0, 0.5, 30), ticks_per_temperature=300, rng=0)
    print(format_grid(result.grid))
    print(result)
    print()


def run_all_examples():
    """Run all examples."""
    example_packed_matrix()
    example_inhibition()
    example_temperature()
    example_annealing()
    example_clamped_units()
    example_sudoku()


if __name__ == '__main__':
    run_all_examples()
