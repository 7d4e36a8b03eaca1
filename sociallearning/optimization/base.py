# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import warnings
from numbers import Real
import numpy as np
import sociallearning.common.typing as tp
from sociallearning.common import tools as sltools
from sociallearning.common import errors as errors
from sociallearning.common.decorators import Registry
from .population import GlobalBest


OptCls = tp.Union["ConfiguredOptimizer", tp.Type["Optimizer"]]
registry: Registry[OptCls] = Registry()
_OptimCallBack = tp.Union[
    tp.Callable[["Optimizer", np.ndarray, float], None], tp.Callable[["Optimizer"], None]
]
logger = logging.getLogger(__name__)


def _fitness(value: tp.Any) -> float:
    """Converts the output of the objective function to a float fitness.
    NaN is converted to +inf (it can never be better than anything), and
    non-finite values are reported through a BadFitnessWarning.
    """
    if isinstance(value, np.ndarray):
        if value.size != 1:
            raise TypeError(f"Only scalar fitness values are supported (got array of shape {value.shape})")
        value = value.item()
    # using "float" along "Real" because mypy does not understand "Real" for now Issue #3186
    if not isinstance(value, (Real, float)):
        raise TypeError(f"Fitness must be a real number, but got {value!r} (type: {type(value)})")
    fitness = float(value)
    if np.isnan(fitness):
        warnings.warn("Replacing NaN fitness by +inf", errors.BadFitnessWarning)
        return float("inf")
    if np.isinf(fitness):
        warnings.warn(f"Updating fitness with {fitness} value", errors.BadFitnessWarning)
    return fitness


def _random_state(seed: tp.RandomStateLike) -> np.random.RandomState:
    if isinstance(seed, np.random.RandomState):
        return seed
    if seed is None:
        # follows the global numpy seed, so that np.random.seed makes runs reproducible
        seed = np.random.randint(2 ** 32, dtype=np.uint32)
    return np.random.RandomState(seed)


class Optimizer:  # pylint: disable=too-many-instance-attributes
    """Generational optimization framework for minimizing a function over a box.

    Each instance runs one single trial: it owns its population, its evaluation counter,
    its best record and its random state, so that independent trials are independent
    instances (which can safely run in parallel processes).

    This class is abstract, it provides the budget loop and the evaluation bookkeeping,
    while subclasses implement :code:`_internal_initialize` (initial population, which
    must evaluate each individual through :code:`_evaluate`) and :code:`_internal_step`
    (one generation).

    Parameters
    ----------
    dimension: int
        dimension of the optimization space
    budget: int/None
        number of allowed evaluations
    lower: float
        lower bound of every variable
    upper: float
        upper bound of every variable
    random_state: int, np.random.RandomState or None
        seed or random state used for all the random draws of the trial
    """

    def __init__(
        self,
        dimension: int,
        budget: tp.Optional[int] = None,
        lower: float = -100.0,
        upper: float = 100.0,
        random_state: tp.RandomStateLike = None,
    ) -> None:
        if isinstance(dimension, bool) or not isinstance(dimension, (int, np.integer)) or dimension <= 0:
            raise errors.ConfigurationError(f"Dimension must be a strictly positive integer (got {dimension!r})")
        if budget is not None and int(budget) <= 0:
            raise errors.ConfigurationError(f"Budget must be strictly positive (got {budget})")
        if not (np.isfinite(lower) and np.isfinite(upper)) or lower >= upper:
            raise errors.ConfigurationError(f"Bounds must be finite with lower < upper (got [{lower}, {upper}])")
        self.dimension = int(dimension)
        self.budget = None if budget is None else int(budget)
        self.lower = float(lower)
        self.upper = float(upper)
        self._rng = _random_state(random_state)
        self.name = self.__class__.__name__  # printed name in repr
        # trial state
        self._best = GlobalBest()
        self._num_evaluations = 0
        self._generation = 0
        self._started = False
        self.history: tp.List[float] = []  # best fitness after initialization and after each generation
        self._callbacks: tp.Dict[str, tp.List[tp.Any]] = {}

    @property
    def random_state(self) -> np.random.RandomState:
        """np.random.RandomState: random state the optimizer must pull from."""
        return self._rng

    @property
    def num_evaluations(self) -> int:
        """int: Number of calls to the objective function."""
        return self._num_evaluations

    @property
    def generation(self) -> int:
        """int: Number of completed generations (initialization excluded)."""
        return self._generation

    @property
    def best_fitness(self) -> float:
        """float: best fitness found so far (+inf before any evaluation)."""
        return self._best.fitness

    def __repr__(self) -> str:
        return (
            f"Instance of {self.name}(dimension={self.dimension}, budget={self.budget}, "
            f"bounds=[{self.lower}, {self.upper}])"
        )

    def register_callback(self, name: str, callback: _OptimCallBack) -> None:
        """Add a callback method called either after each evaluation ("tell") with arguments
        :code:`(optimizer, x, fitness)`, or at the end of the initialization and of each
        generation ("generation") with argument :code:`(optimizer,)`.
        This can be useful for custom logging or early stopping.

        Parameters
        ----------
        name: str
            name of the event to register the callback for (either :code:`tell` or :code:`generation`)
        callback: callable
            a callable taking the arguments of the event
        """
        if name not in ["tell", "generation"]:
            raise errors.SocialLearningRuntimeError(
                f'Only "tell" and "generation" events can have callbacks (not {name})'
            )
        self._callbacks.setdefault(name, []).append(callback)

    def remove_all_callbacks(self) -> None:
        """Removes all registered callables"""
        self._callbacks = {}

    def _evaluate(self, objective_function: tp.ObjectiveFunction, x: np.ndarray) -> float:
        """Evaluates one point, increments the evaluation counter and calls the "tell" callbacks"""
        fitness = _fitness(objective_function(x))
        self._num_evaluations += 1
        for callback in self._callbacks.get("tell", []):
            callback(self, x, fitness)
        return fitness

    def _end_generation(self, verbosity: int) -> None:
        self.history.append(self._best.fitness)
        logger.debug(
            "Generation %s: best fitness %s after %s evaluations",
            self._generation,
            self._best.fitness,
            self._num_evaluations,
        )
        if verbosity:
            print(f"Generation {self._generation}: best fitness {self._best.fitness} ({self._num_evaluations} evaluations)")
        for callback in self._callbacks.get("generation", []):
            callback(self)

    def recommend(self) -> np.ndarray:
        """Provides the best point found so far

        Returns
        -------
        np.ndarray
            a copy of the vector with minimal fitness
        """
        if self._best.x is None:
            raise errors.SocialLearningRuntimeError("No recommendation available before the first evaluation")
        return np.array(self._best.x, copy=True)

    # Internal methods which must be overloaded
    def _internal_initialize(self, objective_function: tp.ObjectiveFunction) -> None:
        raise NotImplementedError

    def _internal_step(self, objective_function: tp.ObjectiveFunction) -> None:
        raise NotImplementedError

    def minimize(self, objective_function: tp.ObjectiveFunction, verbosity: int = 0) -> np.ndarray:
        """Optimization (minimization) procedure, running the full trial:
        initialization, then generations until the budget is exhausted.

        Parameters
        ----------
        objective_function: callable
            A callable to optimize (minimize), taking a 1-dimensional np.ndarray
        verbosity: int
            print information about the optimization (0: None, 1: best fitness at each generation)

        Returns
        -------
        np.ndarray
            The vector with minimal fitness

        Note
        ----
        The budget is checked once per generation only, so the final number of evaluations may
        exceed the budget by less than one generation.
        """
        if self.budget is None:
            raise errors.SocialLearningRuntimeError("Budget must be specified")
        if self._started:
            raise errors.SocialLearningRuntimeError(
                f"{self.name} instances run one trial only, create a new instance for another trial"
            )
        self._started = True
        logger.info("Starting %r", self)
        try:
            self._internal_initialize(objective_function)
            self._end_generation(verbosity)
            while self._num_evaluations < self.budget:
                self._internal_step(objective_function)
                self._generation += 1
                self._end_generation(verbosity)
        except errors.SocialLearningEarlyStopping as e:
            logger.info("Early stopping after %s evaluations: %s", self._num_evaluations, e)
        logger.info(
            "Finished %s with best fitness %s after %s evaluations",
            self.name,
            self._best.fitness,
            self._num_evaluations,
        )
        return self.recommend()


class ConfiguredOptimizer:
    """Creates optimizer-like instances with configuration.

    Parameters
    ----------
    OptimizerClass: type
        class of the optimizer to configure. It is instantiated with a :code:`config` keyword
        argument referencing this instance.
    config: dict
        dictionnary of all the configurations

    Note
    ----
    - This provides a default repr which can be bypassed through set_name
    - An optimizer is instantiated at creation so that invalid settings fail straight away
    """

    def __init__(self, OptimizerClass: tp.Type[Optimizer], config: tp.Dict[str, tp.Any]) -> None:
        self._OptimizerClass = OptimizerClass
        config.pop("self", None)  # self comes from "locals()"
        config.pop("__class__", None)  # self comes from "locals()"
        self._config = config  # keep all, to avoid weird behavior at mismatch between optim and configoptim
        diff = sltools.non_default_settings(self.__class__, config)
        params = ", ".join(f"{x}={y!r}" for x, y in sorted(diff.items()))
        self.name = f"{self.__class__.__name__}({params})"

    def _check(self) -> None:
        """Instantiates an optimizer for init checks (to be called once attributes are set)"""
        self(dimension=2, random_state=0)

    def config(self) -> tp.Dict[str, tp.Any]:
        return dict(self._config)

    def __call__(
        self,
        dimension: int,
        budget: tp.Optional[int] = None,
        lower: float = -100.0,
        upper: float = 100.0,
        random_state: tp.RandomStateLike = None,
    ) -> Optimizer:
        """Creates an optimizer, for one trial

        Parameters
        ----------
        dimension: int
            dimension of the optimization space
        budget: int/None
            number of allowed evaluations
        lower: float
            lower bound of every variable
        upper: float
            upper bound of every variable
        random_state: int, np.random.RandomState or None
            seed or random state of the trial
        """
        run = self._OptimizerClass(  # type: ignore
            dimension=dimension, budget=budget, lower=lower, upper=upper, random_state=random_state, config=self
        )
        run.name = self.name
        return run

    def __repr__(self) -> str:
        return self.name

    def set_name(self, name: str, register: bool = False) -> "ConfiguredOptimizer":
        """Set a new representation for the instance"""
        self.name = name
        if register:
            registry.register_name(name, self)
        return self

    def __eq__(self, other: tp.Any) -> tp.Any:
        if self.__class__ == other.__class__:
            if self._config == other._config:
                return True
        return False
