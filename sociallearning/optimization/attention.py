# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Attention operator of the social learning algorithm.

The population is ranked by fitness and split into an elite (model) group and
a non-elite group. A two-sample Student t-test compares both groups on each
dimension: a large absolute t-value means the elite members are
distinguishable from the others on this dimension, which is therefore worth
imitating (or avoiding). The absolute t-value of one random dimension is used
as a shared threshold for the whole generation.
"""

import numpy as np
import sociallearning.common.typing as tp
from .population import Population


def ranking(fitness: tp.ArrayLike) -> np.ndarray:
    """Indices of the individuals from best (lowest fitness) to worst.
    The sort is stable: individuals with equal fitness keep their storage order.
    """
    return np.argsort(np.asarray(fitness, dtype=float), kind="stable")


def t_statistic(sample1: tp.ArrayLike, sample2: tp.ArrayLike) -> tp.Any:
    """Two-sample Student t-statistic (pooled variance) of sample1 versus sample2.

    Parameters
    ----------
    sample1: array-like
        first sample, of shape (n1,) or (n1, dimension)
    sample2: array-like
        second sample, of shape (n2,) or (n2, dimension)

    Returns
    -------
    float or np.ndarray
        the t-value (one per column for 2-dimensional samples).
        It is 0 wherever the pooled standard deviation is 0, and everywhere
        if there is no degree of freedom (n1 + n2 <= 2).
    """
    s1, s2 = (np.asarray(s, dtype=float) for s in (sample1, sample2))
    n1, n2 = s1.shape[0], s2.shape[0]
    if not n1 or not n2:
        raise ValueError(f"Samples must not be empty (got sizes {n1} and {n2})")
    mean1, mean2 = s1.mean(axis=0), s2.mean(axis=0)
    dof = n1 + n2 - 2
    diff = np.asarray(mean1 - mean2, dtype=float)
    if dof <= 0:
        out = np.zeros_like(diff)
    else:
        sum_squares = ((s1 - mean1) ** 2).sum(axis=0) + ((s2 - mean2) ** 2).sum(axis=0)
        pooled = np.sqrt(sum_squares / dof * (1.0 / n1 + 1.0 / n2))
        out = np.zeros_like(diff)
        np.divide(diff, pooled, out=out, where=pooled != 0)
    return float(out) if out.ndim == 0 else out


class Attention(tp.NamedTuple):
    """Output of the attention operator for one generation

    Parameters
    ----------
    ranking: np.ndarray
        indices of the individuals, from best to worst
    elite_size: int
        number of individuals in the elite (model) group
    statistics: np.ndarray
        t-value of the elite group versus the rest, for each dimension
    threshold: float
        attention threshold (non-negative), shared by all dimensions
    """

    ranking: np.ndarray
    elite_size: int
    statistics: np.ndarray
    threshold: float

    @property
    def negative_threshold(self) -> float:
        return -self.threshold

    @property
    def elite(self) -> np.ndarray:
        return self.ranking[: self.elite_size]

    @property
    def non_elite(self) -> np.ndarray:
        return self.ranking[self.elite_size :]


def analyze(population: Population, elite_size: int, random_state: np.random.RandomState) -> Attention:
    """Ranks the population, tests each dimension of the elite group against the
    non-elite group, and draws the attention threshold from one random dimension.
    """
    if not 0 < elite_size < population.popsize:
        raise ValueError(f"Elite size must be in [1, {population.popsize - 1}] (got {elite_size})")
    order = ranking(population.fitness)
    elite, non_elite = order[:elite_size], order[elite_size:]
    statistics = t_statistic(population.data[elite], population.data[non_elite])
    threshold = abs(float(statistics[random_state.randint(population.dimension)]))
    return Attention(ranking=order, elite_size=elite_size, statistics=statistics, threshold=threshold)
