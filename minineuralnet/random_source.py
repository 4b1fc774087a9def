"""
Random number sources used for weight initialisation and batch sampling.
"""
from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class RandomSource(Protocol):
    """Anything that hands out uniform floats in [0, 1) on demand."""

    def next_uniform(self) -> float:
        ...


class NumpyRandomSource:
    """
    RandomSource backed by a numpy Generator.

    Passing the same seed reproduces the same weight initialisation and the
    same sequence of sampled batches.
    """

    def __init__(self, seed=None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def next_uniform(self) -> float:
        return float(self.rng.random())

    def permutation(self, n):
        """Uniformly random ordering of range(n) as a list of ints."""
        return self.rng.permutation(n).tolist()


def shuffled_indices(random_source, n):
    """
    Uniformly random ordering of range(n).

    Sources that can draw permutations do so directly; any other
    RandomSource drives a Fisher-Yates shuffle with next_uniform().
    """
    if hasattr(random_source, 'permutation'):
        return random_source.permutation(n)

    indices = list(range(n))
    for i in range(n - 1, 0, -1):
        j = min(int(random_source.next_uniform() * (i + 1)), i)
        indices[i], indices[j] = indices[j], indices[i]
    return indices
