# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import inspect
import typing as tp
import pytest
import numpy as np


def assert_in_bounds(points: tp.Any, lower: float, upper: float, err_msg: str = "") -> None:
    """Asserts that all coordinates of the points lie in [lower, upper], with the
    offending values in the error message.
    This function should only be used in tests.
    """
    values = np.asarray(points, dtype=float)
    outside = values[(values < lower) | (values > upper)]
    assert not outside.size, f"{outside.size} value(s) out of [{lower}, {upper}]: {outside[:10]}\n{err_msg}"


def assert_non_increasing(values: tp.Sequence[float], err_msg: str = "") -> None:
    """Asserts that a sequence (such as a best fitness history) never increases"""
    diffs = np.diff(np.asarray(values, dtype=float))
    increases = np.flatnonzero(diffs > 0)
    assert not increases.size, f"Sequence increases after position(s) {increases.tolist()}\n{err_msg}"


class parametrized:
    """Simplified decorator API for specifying named parametrized test with pytests
    (like with old "genty" package)

    Parameters
    ----------
    **kwargs:
        name of the argument is converted as id of the experiments, and the provided tuple
        contains a value for each of the arguments of the underlying function (in the definition order).
    """

    def __init__(self, **kwargs: tp.Tuple[tp.Any, ...]):
        self.ids = sorted(kwargs)
        self.params = tuple(kwargs[name] for name in self.ids)
        assert self.params
        self.num_params = len(self.params[0])
        assert all(isinstance(p, (tuple, list)) for p in self.params)
        assert all(self.num_params == len(p) for p in self.params[1:])

    def __call__(self, func: tp.Callable[..., None]) -> tp.Any:  # type is lost here :(
        names = list(inspect.signature(func).parameters.keys())
        assert len(names) == self.num_params, f"Parameter names: {names}"
        return pytest.mark.parametrize(
            ",".join(names), self.params if self.num_params > 1 else [p[0] for p in self.params], ids=self.ids
        )(func)
