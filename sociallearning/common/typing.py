# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Definitions of some convenient types, to be imported as :code:`tp`.
"""
# pylint: disable=unused-import
# structures
from typing import Any as Any
from typing import Type as Type
from typing import TypeVar as TypeVar
from typing import Optional as Optional
from typing import Union as Union

# containers
from typing import Dict as Dict
from typing import Tuple as Tuple
from typing import List as List
from typing import Sequence as Sequence
from typing import NamedTuple as NamedTuple

# others
from typing import Iterator as Iterator
from typing import Callable as Callable
from pathlib import Path as Path
from typing_extensions import Protocol

#
import numpy as _np


ArrayLike = Union[Tuple[float, ...], List[float], _np.ndarray]
PathLike = Union[str, Path]
FloatLoss = float
# seed, random state to draw from, or None for a seed drawn from the global numpy random state
RandomStateLike = Optional[Union[int, _np.random.RandomState]]


# %% Protocol definitions

X = TypeVar("X", covariant=True)


class ObjectiveFunction(Protocol):
    """Function to minimize: maps a vector of the box to its fitness"""

    # pylint: disable=pointless-statement

    def __call__(self, x: _np.ndarray) -> float:
        ...


class JobLike(Protocol[X]):
    # pylint: disable=pointless-statement

    def result(self) -> X:
        ...


class ExecutorLike(Protocol):
    """Anything dispatching trials like concurrent.futures executors"""

    # pylint: disable=pointless-statement, unused-argument

    def submit(self, fn: Callable[..., X], *args: Any, **kwargs: Any) -> JobLike[X]:
        ...
