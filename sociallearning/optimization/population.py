# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import sociallearning.common.typing as tp


class Population:
    """Current generation of a trial: one row of genes per individual, and
    the corresponding fitness values (lower is better).

    Parameters
    ----------
    data: np.ndarray
        genes, with shape (popsize, dimension)
    fitness: np.ndarray or None
        fitness of each individual, +inf (not evaluated yet) if not provided

    Note
    ----
    The storage order is incidental: ranking is provided as a separate index
    view (see :code:`attention.ranking`) and never reorders the rows.
    """

    def __init__(self, data: np.ndarray, fitness: tp.Optional[np.ndarray] = None) -> None:
        self.data = np.array(data, dtype=float)
        if self.data.ndim != 2:
            raise ValueError(f"Population data must be 2-dimensional, got shape {self.data.shape}")
        self.fitness = (
            np.full(self.popsize, np.inf) if fitness is None else np.array(fitness, dtype=float)
        )
        if self.fitness.shape != (self.popsize,):
            raise ValueError(f"Expected {self.popsize} fitness values but got shape {self.fitness.shape}")

    @classmethod
    def sample(
        cls, popsize: int, dimension: int, lower: float, upper: float, random_state: np.random.RandomState
    ) -> "Population":
        """Draws every gene of every individual independently and uniformly in [lower, upper]"""
        return cls(random_state.uniform(lower, upper, size=(popsize, dimension)))

    @property
    def popsize(self) -> int:
        return self.data.shape[0]

    @property
    def dimension(self) -> int:
        return self.data.shape[1]

    def replace(self, index: int, x: np.ndarray, fitness: float) -> None:
        """Replaces the whole individual (genes and fitness)"""
        self.data[index] = x
        self.fitness[index] = fitness

    def __len__(self) -> int:
        return self.popsize

    def __repr__(self) -> str:
        return f"Population(popsize={self.popsize}, dimension={self.dimension})"


class GlobalBest:
    """Best individual seen so far in a trial.
    It starts at the worst possible value and can only improve.
    """

    def __init__(self) -> None:
        self.index = -1
        self.fitness = float("inf")
        self.x: tp.Optional[np.ndarray] = None

    def update(self, index: int, fitness: float, x: np.ndarray, strict: bool = True) -> bool:
        """Records the individual if it improves (strict: :code:`<`, else :code:`<=`) over the
        current best, and returns whether it did.
        """
        improves = fitness < self.fitness if strict else fitness <= self.fitness
        if improves:
            self.index = index
            self.fitness = fitness
            self.x = np.array(x, copy=True)
        return bool(improves)

    def __repr__(self) -> str:
        return f"GlobalBest(index={self.index}, fitness={self.fitness})"
