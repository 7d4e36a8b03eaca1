# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import sociallearning.common.typing as tp
from sociallearning.common import errors
from . import corefuncs


class ArtificialFunction:
    """Boxed objective function: one of the registered test functions,
    restricted to a given dimension and to the box [lower, upper]^dimension.
    Instances are callables taking a vector and returning its fitness (to be minimized).

    Parameters
    ----------
    name: str
        name of a function registered in :code:`corefuncs.registry` (sphere, rastrigin, ...)
    dimension: int
        dimension of the input vectors
    lower: float
        lower bound of each variable
    upper: float
        upper bound of each variable
    """

    def __init__(self, name: str, dimension: int, lower: float = -100.0, upper: float = 100.0) -> None:
        self.name = name
        self._func = corefuncs.registry[name]  # raises UnknownFunctionError
        if isinstance(dimension, bool) or not isinstance(dimension, (int, np.integer)) or dimension <= 0:
            raise errors.ConfigurationError(f"Dimension must be a strictly positive integer (got {dimension!r})")
        if name in ("rosenbrock", "discus", "cigar") and dimension < 2:
            raise errors.ConfigurationError(f"Function {name} requires at least 2 dimensions")
        if not (np.isfinite(lower) and np.isfinite(upper)) or lower >= upper:
            raise errors.ConfigurationError(f"Bounds must be finite with lower < upper (got [{lower}, {upper}])")
        self.dimension = int(dimension)
        self.lower = float(lower)
        self.upper = float(upper)

    def __call__(self, x: tp.ArrayLike) -> float:
        data = np.asarray(x, dtype=float)
        if data.shape != (self.dimension,):
            raise ValueError(f"Expected input of shape ({self.dimension},) for {self} but got {data.shape}")
        return float(self._func(data))

    @property
    def descriptors(self) -> tp.Dict[str, tp.Any]:
        """Description of the function settings, for reports"""
        return dict(function=self.name, dimension=self.dimension, lower=self.lower, upper=self.upper)

    def copy(self) -> "ArtificialFunction":
        return ArtificialFunction(self.name, self.dimension, lower=self.lower, upper=self.upper)

    def __repr__(self) -> str:
        return f"ArtificialFunction({self.name}, dimension={self.dimension}, bounds=[{self.lower}, {self.upper}])"

    def __eq__(self, other: tp.Any) -> bool:
        return isinstance(other, ArtificialFunction) and self.descriptors == other.descriptors
