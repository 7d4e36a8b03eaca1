# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Classical test functions for continuous minimization, all deterministic
and with optimum value 0.
"""

from math import exp, sqrt
import numpy as np
import sociallearning.common.typing as tp
from sociallearning.common.decorators import Registry


registry: Registry[tp.Callable[[np.ndarray], float]] = Registry()


@registry.register
def sphere(x: np.ndarray) -> float:
    """The most classical continuous optimization testbed.

    If you do not solve that one then you have a bug."""
    assert x.ndim == 1
    return float(x.dot(x))


@registry.register
def sphere1(x: np.ndarray) -> float:
    """Translated sphere function."""
    return sphere(x - 1.0)


@registry.register
def ellipsoid(x: np.ndarray) -> float:
    """Classical example of ill conditioned function.

    The other classical example is cigar.
    """
    weights = 10 ** np.linspace(0, 6, x.size)
    return float(weights.dot(x ** 2))


@registry.register
def cigar(x: np.ndarray) -> float:
    """Classical example of ill conditioned function."""
    return float(x[0]) ** 2 + 1000000.0 * sphere(x[1:])


@registry.register
def discus(x: np.ndarray) -> float:
    """Only one variable is very penalized."""
    return sphere(x[1:]) + 1000000.0 * float(x[0]) ** 2


@registry.register
def schwefel_1_2(x: np.ndarray) -> float:
    return sphere(np.cumsum(x))


@registry.register
def step(x: np.ndarray) -> float:
    """Plateaus everywhere: the gradient is zero almost everywhere."""
    return sphere(np.floor(x + 0.5))


@registry.register
def rastrigin(x: np.ndarray) -> float:
    """Classical multimodal function."""
    cosi = float(np.sum(np.cos(2 * np.pi * x)))
    return float(10 * (len(x) - cosi) + sphere(x))


@registry.register
def rosenbrock(x: np.ndarray) -> float:
    x_m_1 = x[:-1] - 1
    x_diff = x[:-1] ** 2 - x[1:]
    return float(100 * x_diff.dot(x_diff) + x_m_1.dot(x_m_1))


@registry.register
def ackley(x: np.ndarray) -> float:
    dim = x.size
    sum_cos = np.sum(np.cos(2 * np.pi * x))
    return -20.0 * exp(-0.2 * sqrt(sphere(x) / dim)) - exp(sum_cos / dim) + 20 + exp(1)


@registry.register
def griewank(x: np.ndarray) -> float:
    """Multimodal function, with many regularly distributed local minima."""
    part1 = sphere(x)
    part2 = np.prod(np.cos(x / np.sqrt(1 + np.arange(len(x)))))
    return 1 + (float(part1) / 4000.0) - float(part2)
