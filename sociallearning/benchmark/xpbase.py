# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import sys
import time
import logging
import warnings
import traceback
import numpy as np
import sociallearning.common.typing as tp
from sociallearning.common import errors
from ..functions import ArtificialFunction
from ..optimization import base as obase
from ..optimization.optimizerlib import (
    registry as optimizer_registry,
)  # import from optimizerlib so as to fill it

logger = logging.getLogger(__name__)


def create_seed_generator(seed: tp.Optional[int]) -> tp.Iterator[tp.Optional[int]]:
    """Create a stream of seeds, independent from the standard random stream.
    This is designed to be used for seeding independent trials, for reproducibility.

    Parameter
    ---------
    seed: int or None
        the initial seed

    Yields
    ------
    int or None
        potential new seeds, or None if the initial seed was None
    """
    generator = None if seed is None else np.random.RandomState(seed=seed)
    while True:
        yield None if generator is None else int(generator.randint(2 ** 32, dtype=np.uint32))


def run_trial(
    function: ArtificialFunction,
    optimizer: obase.ConfiguredOptimizer,
    budget: int,
    trial: int = 0,
    seed: tp.Optional[int] = None,
) -> tp.Dict[str, tp.Any]:
    """Runs one independent trial with a fresh optimizer and returns its summary

    Note
    ----
    This function catches errors (but forwards the traceback to stderr), and fills up
    the "error" field ("" if no error, else the error name). Configuration errors are raised.
    """
    result: tp.Dict[str, tp.Any] = dict(
        trial=trial,
        seed=-1 if seed is None else seed,
        loss=np.nan,
        elapsed_budget=0,
        num_generations=0,
        elapsed_time=np.nan,
        error="",
    )
    result.update(function.descriptors)
    result["optimizer_name"] = repr(optimizer)
    result["budget"] = budget
    # the optimizer is created here, so that invalid settings fail before any evaluation
    opt = optimizer(function.dimension, budget=budget, lower=function.lower, upper=function.upper, random_state=seed)
    t0 = time.time()
    try:
        with warnings.catch_warnings():
            # benchmarks do not need to be efficient
            warnings.filterwarnings("ignore", category=errors.InefficientSettingsWarning)
            opt.minimize(function.copy())
    except Exception as e:  # pylint: disable=broad-except
        result["error"] = e.__class__.__name__
        print(f"Error when running trial {trial} of {opt} on {function}:", file=sys.stderr)
        traceback.print_exc()
        print("\n", file=sys.stderr)
    result["elapsed_time"] = time.time() - t0
    result["loss"] = opt.best_fitness
    result["elapsed_budget"] = opt.num_evaluations
    result["num_generations"] = opt.generation
    logger.info("Trial %s on %s: best fitness %s", trial, function, opt.best_fitness)
    return result


class Experiment:
    """Specifies an experiment: several independent trials of an optimizer on a function.

    Parameters
    ----------
    function: ArtificialFunction
        the function to minimize, which also provides the bounds
    optimizer: str or ConfiguredOptimizer
        the optimizer, or the name of an optimizer registered in optimizerlib
    budget: int
        maximum number of evaluations of each trial
    num_trials: int
        number of independent trials
    seed: int or None
        seed of the experiment. Each trial is seeded independently from a stream derived from it,
        so that results do not depend on how trials are dispatched.
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        function: ArtificialFunction,
        optimizer: tp.Union[str, obase.ConfiguredOptimizer],
        budget: int,
        num_trials: int = 1,
        seed: tp.Optional[int] = None,
    ) -> None:
        if isinstance(optimizer, str):
            optimizer = optimizer_registry[optimizer]  # type: ignore
        if not isinstance(optimizer, obase.ConfiguredOptimizer):
            raise errors.ConfigurationError(f"Experiments require a configured optimizer (got {optimizer!r})")
        if int(budget) <= 0 or int(num_trials) <= 0:
            raise errors.ConfigurationError(
                f"Budget and number of trials must be strictly positive (got {budget} and {num_trials})"
            )
        self.function = function
        self.optimizer = optimizer
        self.budget = int(budget)
        self.num_trials = int(num_trials)
        self.seed = seed

    def __repr__(self) -> str:
        return (
            f"Experiment: {self.optimizer}<budget={self.budget}, num_trials={self.num_trials}> "
            f"on {self.function} with seed {self.seed}"
        )

    def run(self, executor: tp.Optional[tp.ExecutorLike] = None) -> tp.List[tp.Dict[str, tp.Any]]:
        """Runs all the trials, sequentially or through the provided executor

        Parameters
        ----------
        executor: Executor-like object
            an object such as concurrent.futures.ProcessPoolExecutor for running trials in parallel

        Returns
        -------
        list
            one summary dict per trial, in trial order
        """
        seeds = create_seed_generator(self.seed)
        settings = [(self.function, self.optimizer, self.budget, k, next(seeds)) for k in range(self.num_trials)]
        logger.info("Starting %s", self)
        if executor is None:
            return [run_trial(*setting) for setting in settings]
        jobs = [executor.submit(run_trial, *setting) for setting in settings]
        return [job.result() for job in jobs]
