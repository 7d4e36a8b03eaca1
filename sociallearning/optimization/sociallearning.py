# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import warnings
import numpy as np
import sociallearning.common.typing as tp
from sociallearning.common import errors
from . import base
from . import attention as attn
from .population import Population

logger = logging.getLogger(__name__)


def _others(candidates: np.ndarray, excluded: int) -> np.ndarray:
    """Candidates without the excluded index, or all of them if nothing would be left"""
    others = candidates[candidates != excluded]
    return others if others.size else candidates


def reflect(x: np.ndarray, lower: float, upper: float) -> np.ndarray:
    """Boundary control: values beyond a bound are reflected inside with half the overshoot.
    This is a single pass, an overshoot larger than twice the domain width stays out of bounds.
    """
    return np.where(x > upper, upper - 0.5 * (x - upper), np.where(x < lower, lower + 0.5 * (lower - x), x))


# pylint: disable=too-many-arguments,too-many-locals
def reproduce(
    population: Population,
    attention: attn.Attention,
    lower: float,
    upper: float,
    p_imitation: float,
    p_randomization: float,
    random_state: np.random.RandomState,
) -> np.ndarray:
    """Reproduction and reinforcement operators: creates one offspring per individual, gene by gene.

    On dimensions where the model (elite) group differs significantly from the others
    (t-value >= threshold), the offspring copies a random model member and adds a random step
    of up to the distance between this model and its parent (positive reinforcement).
    Where the t-value is <= -threshold, the step is subtracted instead (negative reinforcement).
    Other dimensions are explored: random imitation of any other individual with probability
    p_imitation, else reinitialization with probability p_randomization, else the gene is kept.

    Returns
    -------
    np.ndarray
        the offspring genes, with the shape of the population data (the population is left untouched)
    """
    data = population.data
    popsize, dimension = data.shape
    dims = np.arange(dimension)
    everyone = np.arange(popsize)
    elite = attention.elite
    stats = attention.statistics
    positive = stats >= attention.threshold
    negative = ~positive & (stats <= attention.negative_threshold)
    explore = ~(positive | negative)
    offspring = np.empty_like(data)
    for i in range(popsize):
        models = _others(elite, i)
        others = _others(everyone, i)
        r = models[random_state.randint(models.size, size=dimension)]
        r1 = others[random_state.randint(others.size, size=dimension)]
        nd = random_state.uniform(0, 1, size=dimension)
        model_genes = data[r, dims]
        delta = np.abs(model_genes - data[i])
        imitate = explore & (random_state.uniform(0, 1, size=dimension) < p_imitation)
        randomize = explore & ~imitate & (random_state.uniform(0, 1, size=dimension) < p_randomization)
        child = np.array(data[i], copy=True)  # genes are kept unless stated otherwise
        child[positive] = (model_genes + nd * delta)[positive]
        child[negative] = (model_genes - nd * delta)[negative]
        child[imitate] = data[r1, dims][imitate]
        child[randomize] = random_state.uniform(lower, upper, size=dimension)[randomize]
        offspring[i] = reflect(child, lower, upper)
    return offspring


class _SocialLearning(base.Optimizer):
    """Social learning algorithm (SLA), see SocialLearning for the configuration."""

    def __init__(
        self,
        dimension: int,
        budget: tp.Optional[int] = None,
        lower: float = -100.0,
        upper: float = 100.0,
        random_state: tp.RandomStateLike = None,
        config: tp.Optional["SocialLearning"] = None,
    ) -> None:
        super().__init__(dimension, budget=budget, lower=lower, upper=upper, random_state=random_state)
        self._config = SocialLearning() if config is None else config
        self.popsize = self._config.popsize
        self.elite_size = self.popsize // 2 if self._config.elite_size is None else self._config.elite_size
        if not 0 < self.elite_size < self.popsize:
            raise errors.ConfigurationError(
                f"Elite size must be in [1, {self.popsize - 1}] for a population of size {self.popsize} "
                f"(got {self.elite_size})"
            )
        if self.budget is not None and self.budget <= self.popsize:
            warnings.warn(
                f"Budget {self.budget} only allows for evaluating the initial population of size {self.popsize}",
                errors.InefficientSettingsWarning,
            )
        self.population: tp.Optional[Population] = None
        self.attention: tp.Optional[attn.Attention] = None  # last attention analysis, for inspection

    def _internal_initialize(self, objective_function: tp.ObjectiveFunction) -> None:
        self.population = Population.sample(
            self.popsize, self.dimension, self.lower, self.upper, random_state=self._rng
        )
        for i, x in enumerate(self.population.data):
            fitness = self._evaluate(objective_function, x)
            self.population.fitness[i] = fitness
            self._best.update(i, fitness, x, strict=True)

    def _internal_step(self, objective_function: tp.ObjectiveFunction) -> None:
        assert self.population is not None
        self.attention = attn.analyze(self.population, self.elite_size, random_state=self._rng)
        logger.debug(
            "Attention threshold %s, significant on %s dimension(s) out of %s",
            self.attention.threshold,
            int(np.sum(np.abs(self.attention.statistics) >= self.attention.threshold)),
            self.dimension,
        )
        offspring = reproduce(
            self.population,
            self.attention,
            lower=self.lower,
            upper=self.upper,
            p_imitation=self._config.p_imitation,
            p_randomization=self._config.p_randomization,
            random_state=self._rng,
        )
        self._motivate(objective_function, offspring)

    def recommend(self) -> np.ndarray:
        if self._best.x is None and self.population is not None:
            # no finite fitness yet, the first ranked individual is as good as any
            return np.array(self.population.data[attn.ranking(self.population.fitness)[0]], copy=True)
        return super().recommend()

    def _motivate(self, objective_function: tp.ObjectiveFunction, offspring: np.ndarray) -> None:
        """Motivation operator: offspring replace their parents if they are at least as good."""
        assert self.population is not None
        for i, child in enumerate(offspring):
            fitness = self._evaluate(objective_function, child)
            if fitness <= self.population.fitness[i]:
                self.population.replace(i, child, fitness)
                self._best.update(i, fitness, child, strict=False)


class SocialLearning(base.ConfiguredOptimizer):
    """Social learning algorithm (SLA), a population based optimizer mimicking the
    way individuals learn from the members of their society who are doing well.

    Each generation goes through:

    - attention: the population is split into a model (elite) group of the best individuals
      and the others, and each dimension is checked with a Student t-test for a significant
      difference between both groups. The absolute t-value on one random dimension is used as
      threshold for all dimensions.
    - reproduction and reinforcement: on significant dimensions, an individual imitates a random
      model member and reinforces (positively or negatively) the difference with its own value.
      Other dimensions are explored by random imitation or reinitialization.
    - motivation: offspring replace their parent if they are at least as good.

    Default settings are the reference ones of the algorithm:
    population size 30, 15 models, p_imitation=0.7, p_randomization=0.2.

    Parameters
    ----------
    popsize: int
        size of the population (at least 2)
    elite_size: int or None
        number of members of the model group (defaults to half of the population)
    p_imitation: float
        probability of random imitation on non-significant dimensions
    p_randomization: float
        probability of reinitialization on non-significant dimensions which were not imitated
    """

    # pylint: disable=unused-argument
    def __init__(
        self,
        *,
        popsize: int = 30,
        elite_size: tp.Optional[int] = None,
        p_imitation: float = 0.7,
        p_randomization: float = 0.2,
    ) -> None:
        super().__init__(_SocialLearning, locals())
        if isinstance(popsize, bool) or not isinstance(popsize, (int, np.integer)) or popsize < 2:
            raise errors.ConfigurationError(f"Population size must be an integer >= 2 (got {popsize!r})")
        if elite_size is not None and (isinstance(elite_size, bool) or not isinstance(elite_size, (int, np.integer))):
            raise errors.ConfigurationError(f"Elite size must be an integer or None (got {elite_size!r})")
        for name, proba in [("p_imitation", p_imitation), ("p_randomization", p_randomization)]:
            if not 0 <= proba <= 1:
                raise errors.ConfigurationError(f"{name} must be a probability in [0, 1] (got {proba})")
        self.popsize = int(popsize)
        self.elite_size = None if elite_size is None else int(elite_size)
        self.p_imitation = float(p_imitation)
        self.p_randomization = float(p_randomization)
        self._check()
