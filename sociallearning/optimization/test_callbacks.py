# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import pickle
import logging
from pathlib import Path
import typing as tp
import pytest
import numpy as np
from sociallearning.common import errors
from sociallearning.functions import corefuncs
from . import optimizerlib
from . import callbacks


def test_parameters_logger(tmp_path: Path) -> None:
    filepath = tmp_path / "logs.txt"
    optimizer = optimizerlib.SLA(dimension=2, budget=90, random_state=12)
    logger = callbacks.ParametersLogger(filepath)
    optimizer.register_callback("tell", logger)
    optimizer.minimize(corefuncs.sphere)
    data = logger.load()
    assert len(data) == 90
    assert data[-1]["#num-evaluations"] == 90
    assert data[-1]["#generation"] == 1  # counted once the generation is over
    assert data[0]["#optimizer"] == "SLA"
    assert data[0]["#optimizer#popsize"] == "30"
    assert min(d["#fitness"] for d in data) == optimizer.best_fitness
    np.testing.assert_almost_equal(corefuncs.sphere(np.array(data[0]["x"])), data[0]["#fitness"])
    # without appending, the file is replaced
    other = callbacks.ParametersLogger(filepath, append=False)
    assert not other.load()


def test_optimization_logger(caplog: tp.Any) -> None:
    logger = logging.getLogger("sociallearning.test")
    optimizer = optimizerlib.SLA(dimension=2, budget=90, random_state=12)
    optimizer.register_callback("generation", callbacks.OptimizationLogger(logger=logger, log_interval_seconds=1e-3))
    with caplog.at_level(logging.INFO, logger="sociallearning.test"):
        optimizer.minimize(corefuncs.sphere)
    messages = [r.getMessage() for r in caplog.records if r.name == "sociallearning.test"]
    assert len(messages) == 3
    assert messages[0].startswith("After 30 evaluations (generation 0), best fitness is ")


def test_optimization_printer(capsys: tp.Any) -> None:
    optimizer = optimizerlib.SLA(dimension=2, budget=150, random_state=12)
    optimizer.register_callback("generation", callbacks.OptimizationPrinter(print_interval_generations=2))
    optimizer.minimize(corefuncs.sphere)
    lines = capsys.readouterr().out.splitlines()
    assert [line.split(",")[0] for line in lines] == [
        "After 30 evaluations (generation 0)",
        "After 90 evaluations (generation 2)",
        "After 150 evaluations (generation 4)",
    ]


def test_progress_bar() -> None:
    pytest.importorskip("tqdm")
    optimizer = optimizerlib.SLA(dimension=2, budget=60, random_state=12)
    progress_bar = callbacks.ProgressBar()
    optimizer.register_callback("tell", progress_bar)
    optimizer.minimize(corefuncs.sphere)
    assert progress_bar.num_evaluations == 60
    assert progress_bar.total == 60
    restored = pickle.loads(pickle.dumps(progress_bar))
    assert restored._progress_bar is None


def test_progress_bar_past_budget() -> None:
    pytest.importorskip("tqdm")
    optimizer = optimizerlib.SLA(dimension=2, budget=610, random_state=12)
    progress_bar = callbacks.ProgressBar()
    optimizer.register_callback("tell", progress_bar)
    optimizer.minimize(corefuncs.sphere)
    # the generation started below the budget is fully counted
    assert optimizer.num_evaluations == 630
    assert progress_bar.num_evaluations == 630
    assert progress_bar.total == 630


def test_early_stopping() -> None:
    optimizer = optimizerlib.SLA(dimension=2, budget=600, random_state=12)
    optimizer.register_callback("generation", callbacks.EarlyStopping(lambda opt: opt.generation >= 3))
    recommendation = optimizer.minimize(corefuncs.sphere)
    assert optimizer.num_evaluations == 120
    assert len(optimizer.history) == 4
    assert corefuncs.sphere(recommendation) == optimizer.best_fitness


def test_early_stopping_on_tell() -> None:
    optimizer = optimizerlib.SLA(dimension=2, budget=600, random_state=12)
    optimizer.register_callback("tell", callbacks.EarlyStopping(lambda opt: False))
    with pytest.raises(errors.SocialLearningRuntimeError):
        optimizer.minimize(corefuncs.sphere)


def test_early_stopping_target() -> None:
    optimizer = optimizerlib.SLA(dimension=2, budget=600, random_state=12)
    optimizer.register_callback("generation", callbacks.EarlyStopping.target(float("inf")))
    optimizer.minimize(corefuncs.sphere)
    assert optimizer.generation == 0
    assert optimizer.num_evaluations == 30


def test_no_improvement_stopper() -> None:
    optimizer = optimizerlib.SLA(dimension=2, budget=6000, random_state=12)
    optimizer.register_callback("generation", callbacks.EarlyStopping.no_improvement_stopper(2))
    optimizer.minimize(lambda x: 12.0)
    assert optimizer.generation == 3


def test_timer() -> None:
    optimizer = optimizerlib.SLA(dimension=2, budget=600, random_state=12)
    optimizer.register_callback("generation", callbacks.EarlyStopping.timer(float("inf")))
    optimizer.minimize(corefuncs.sphere)
    assert optimizer.num_evaluations == 600


def test_reporter_intervals() -> None:
    with pytest.raises(errors.ConfigurationError):
        callbacks.OptimizationPrinter(print_interval_generations=0)
    with pytest.raises(errors.ConfigurationError):
        callbacks.OptimizationLogger(log_interval_seconds=-1.0)
