# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import pytest
import numpy as np
from sociallearning.common import errors
from sociallearning.common import testing
from . import base
from . import optimizerlib


@testing.parametrized(
    integer=(3, 3.0),
    float32=(np.float32(2.5), 2.5),
    array=(np.array([3.0]), 3.0),
    zero_dim_array=(np.array(4.0), 4.0),
    boolean=(True, 1.0),
)
def test_fitness(value: tp.Any, expected: float) -> None:
    fitness = base._fitness(value)
    assert isinstance(fitness, float)
    assert fitness == expected


@testing.parametrized(
    string=("blublu",),
    complex_number=(1 + 2j,),
    vector=(np.array([1.0, 2.0]),),
    none=(None,),
)
def test_fitness_errors(value: tp.Any) -> None:
    with pytest.raises(TypeError):
        base._fitness(value)


def test_bad_fitness_values() -> None:
    with pytest.warns(errors.BadFitnessWarning):
        assert base._fitness(float("nan")) == float("inf")
    with pytest.warns(errors.BadFitnessWarning):
        assert base._fitness(float("-inf")) == float("-inf")


def test_abstract_optimizer() -> None:
    opt = base.Optimizer(dimension=2, budget=10)
    assert opt.best_fitness == float("inf")
    with pytest.raises(errors.SocialLearningRuntimeError):
        opt.recommend()
    with pytest.raises(NotImplementedError):
        opt.minimize(np.sum)


def test_callback_registration() -> None:
    opt = optimizerlib.SLA(dimension=2, budget=90, random_state=12)
    with pytest.raises(errors.SocialLearningRuntimeError):
        opt.register_callback("ask", lambda o: None)
    calls: tp.List[tp.Tuple[int, int]] = []
    opt.register_callback("generation", lambda o: calls.append((o.generation, o.num_evaluations)))
    opt.register_callback("tell", lambda o, x, f: calls.append((-1, o.num_evaluations)))
    opt.remove_all_callbacks()
    opt.register_callback("generation", lambda o: calls.append((o.generation, o.num_evaluations)))
    opt.minimize(np.sum)
    assert calls == [(0, 30), (1, 60), (2, 90)]


def test_verbosity(capsys: tp.Any) -> None:
    opt = optimizerlib.SLA(dimension=2, budget=60, random_state=12)
    opt.minimize(np.sum, verbosity=1)
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("Generation 0: best fitness ")
    assert lines[1].endswith("(60 evaluations)")


def test_recommend_returns_copies() -> None:
    opt = optimizerlib.SLA(dimension=2, budget=60, random_state=12)
    recommendation = opt.minimize(np.sum)
    np.testing.assert_array_equal(opt.recommend(), recommendation)
    assert opt.recommend() is not opt.recommend()
