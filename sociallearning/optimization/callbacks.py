# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import json
import time
import datetime
import logging
from pathlib import Path
import numpy as np
import sociallearning.common.typing as tp
from sociallearning.common import errors
from . import base

global_logger = logging.getLogger(__name__)


class _GenerationReporter:
    """Reports the state of the optimizer at the end of a generation, at most every
    :code:`interval_generations` generations unless :code:`interval_seconds` went by.
    The initial population (generation 0) is always reported.
    """

    def __init__(self, interval_generations: int, interval_seconds: float) -> None:
        if interval_generations <= 0 or interval_seconds <= 0:
            raise errors.ConfigurationError(
                f"Report intervals must be strictly positive (got {interval_generations} generations "
                f"and {interval_seconds}s)"
            )
        self._interval_generations = int(interval_generations)
        self._interval_seconds = interval_seconds
        self._next_generation = 0
        self._next_time = time.time() + interval_seconds

    def __call__(self, optimizer: base.Optimizer, *args: tp.Any, **kwargs: tp.Any) -> None:
        if optimizer.generation < self._next_generation and time.time() < self._next_time:
            return
        self._next_generation = optimizer.generation + self._interval_generations
        self._next_time = time.time() + self._interval_seconds
        self._report(optimizer)

    def _report(self, optimizer: base.Optimizer) -> None:
        raise NotImplementedError


class OptimizationPrinter(_GenerationReporter):
    """Printer to register as callback in an optimizer (on "generation"), for printing
    best fitness regularly.

    Parameters
    ----------
    print_interval_generations: int
        max number of generations before performing another print
    print_interval_seconds: float
        max number of seconds before performing another print
    """

    def __init__(self, print_interval_generations: int = 1, print_interval_seconds: float = 60.0) -> None:
        super().__init__(print_interval_generations, print_interval_seconds)

    def _report(self, optimizer: base.Optimizer) -> None:
        print(
            f"After {optimizer.num_evaluations} evaluations (generation {optimizer.generation}), "
            f"best fitness is {optimizer.best_fitness}"
        )


class OptimizationLogger(_GenerationReporter):
    """Logger to register as callback in an optimizer (on "generation"), for logging
    best fitness regularly.

    Parameters
    ----------
    logger: logging.Logger
        logger to write to (defaults to this module's logger)
    log_level: int
        level of the records
    log_interval_generations: int
        max number of generations before performing another log
    log_interval_seconds: float
        max number of seconds before performing another log
    """

    def __init__(
        self,
        *,
        logger: logging.Logger = global_logger,
        log_level: int = logging.INFO,
        log_interval_generations: int = 1,
        log_interval_seconds: float = 60.0,
    ) -> None:
        super().__init__(log_interval_generations, log_interval_seconds)
        self._logger = logger
        self._log_level = log_level

    def _report(self, optimizer: base.Optimizer) -> None:
        self._logger.log(
            self._log_level,
            "After %s evaluations (generation %s), best fitness is %s",
            optimizer.num_evaluations,
            optimizer.generation,
            optimizer.best_fitness,
        )


class ParametersLogger:
    """Records every evaluated point of a run into a file, as one json dict per line.
    Run information is stored under keys starting with "#", the point itself under "x".

    Parameters
    ----------
    filepath: str or pathlib.Path
        the path to dump data to
    append: bool
        whether to append the file (otherwise it replaces it)

    Example
    -------

    .. code-block:: python

        logger = ParametersLogger(filepath)
        optimizer.register_callback("tell", logger)
        optimizer.minimize(func)
        list_of_dict_of_data = logger.load()

    Note
    ----
    The logged "#best" is the best fitness before this evaluation is processed by the optimizer,
    and "#generation" counts the generations completed before the evaluation.
    """

    def __init__(self, filepath: tp.PathLike, append: bool = True) -> None:
        self._session = datetime.datetime.now().strftime("%y-%m-%d %H:%M:%S")
        self._filepath = Path(filepath)
        if not append and self._filepath.exists():
            self._filepath.unlink()
        self._filepath.parent.mkdir(exist_ok=True, parents=True)

    def __call__(self, optimizer: base.Optimizer, x: np.ndarray, fitness: tp.FloatLoss) -> None:
        data: tp.Dict[str, tp.Any] = {
            "#optimizer": optimizer.name,
            "#session": self._session,
            "#num-evaluations": optimizer.num_evaluations,
            "#generation": optimizer.generation,
            "#fitness": fitness,
            "#best": optimizer.best_fitness,
        }
        config = getattr(optimizer, "_config", None)
        if isinstance(config, base.ConfiguredOptimizer):
            data.update({f"#optimizer#{name}": str(value) for name, value in config.config().items()})
        data["x"] = np.asarray(x, dtype=float).tolist()
        with self._filepath.open("a") as f:
            f.write(json.dumps(data) + "\n")

    def load(self) -> tp.List[tp.Dict[str, tp.Any]]:
        """Loads all the records of the file (empty list if there is none)"""
        if not self._filepath.exists():
            return []
        with self._filepath.open("r") as f:
            return [json.loads(line) for line in f if line.strip()]


class ProgressBar:
    """Progress bar over the evaluation budget, to register as callback in an
    optimizer (on "tell"). The current best fitness is displayed alongside.

    Note
    ----
    This requires tqdm, which is only installed with the "benchmark" extra.
    """

    def __init__(self) -> None:
        self._progress_bar: tp.Any = None
        self._best = float("inf")

    def __call__(self, optimizer: base.Optimizer, *args: tp.Any, **kwargs: tp.Any) -> None:
        if self._progress_bar is None:
            # pylint: disable=import-outside-toplevel
            try:
                from tqdm import tqdm  # Inline import to avoid additional dependency
            except ImportError as e:
                raise ImportError(
                    f"{self.__class__.__name__} requires tqdm which is not installed by default "
                    "(pip install tqdm)"
                ) from e
            self._progress_bar = tqdm(total=optimizer.budget, desc=optimizer.name, initial=optimizer.num_evaluations - 1)
        if self._progress_bar.total is not None and self._progress_bar.n >= self._progress_bar.total:
            # the last generation is always completed, even past the budget
            self._progress_bar.total = self._progress_bar.n + 1
        self._progress_bar.update(1)
        if optimizer.best_fitness < self._best:
            self._best = optimizer.best_fitness
            self._progress_bar.set_postfix(best=f"{self._best:g}", refresh=False)

    @property
    def num_evaluations(self) -> int:
        return 0 if self._progress_bar is None else int(self._progress_bar.n)

    @property
    def total(self) -> tp.Optional[int]:
        """Expected number of evaluations, extended when the last generation exceeds the budget"""
        return None if self._progress_bar is None else self._progress_bar.total

    def __getstate__(self) -> tp.Dict[str, tp.Any]:
        """Used for pickling (tqdm is not picklable)"""
        state = dict(self.__dict__)
        state["_progress_bar"] = None
        return state


class EarlyStopping:
    """Callback for stopping the :code:`minimize` method between two generations,
    before the budget is fully used.

    Parameters
    ----------
    stopping_criterion: func(optimizer) -> bool
        function that takes the current optimizer as input and returns True
        if the minimization must be stopped

    Note
    ----
    This callback must be registered on the "generation" event only.

    Example
    -------
    In the following code, the :code:`minimize` method will be stopped after the 4th generation

    >>> early_stopping = sl.callbacks.EarlyStopping(lambda opt: opt.generation >= 4)
    >>> optimizer.register_callback("generation", early_stopping)
    >>> optimizer.minimize(_func)
    """

    def __init__(self, stopping_criterion: tp.Callable[[base.Optimizer], bool]) -> None:
        self.stopping_criterion = stopping_criterion

    def __call__(self, optimizer: base.Optimizer, *args: tp.Any, **kwargs: tp.Any) -> None:
        if args or kwargs:
            raise errors.SocialLearningRuntimeError("EarlyStopping must be registered on generation event")
        if self.stopping_criterion(optimizer):
            raise errors.SocialLearningEarlyStopping(
                f"Early stopping criterion is reached at generation {optimizer.generation}"
            )

    @classmethod
    def timer(cls, max_duration: float) -> "EarlyStopping":
        """Early stop when max_duration seconds went by since the end of the initial population"""
        return cls(_DurationCriterion(max_duration))

    @classmethod
    def target(cls, fitness: float) -> "EarlyStopping":
        """Early stop as soon as the best fitness reaches the target value"""
        return cls(lambda opt: opt.best_fitness <= fitness)

    @classmethod
    def no_improvement_stopper(cls, tolerance_window: int) -> "EarlyStopping":
        """Early stop when best fitness did not decrease during more than tolerance_window generations"""
        return cls(_StagnationCriterion(tolerance_window))


class _DurationCriterion:
    def __init__(self, max_duration: float) -> None:
        self._max_duration = max_duration
        self._start: tp.Optional[float] = None

    def __call__(self, optimizer: base.Optimizer) -> bool:
        if self._start is None:
            self._start = time.monotonic()
        return time.monotonic() - self._start > self._max_duration


class _StagnationCriterion:
    """Reads the best fitness history: it never increases, so equal values
    tolerance_window + 1 generations apart mean there was no improvement in between.
    """

    def __init__(self, tolerance_window: int) -> None:
        self._tolerance_window = int(tolerance_window)

    def __call__(self, optimizer: base.Optimizer) -> bool:
        history = optimizer.history
        span = self._tolerance_window + 1
        return len(history) > span and history[-1 - span] <= history[-1]
