# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .xpbase import Experiment as Experiment
from .core import compute as compute
from .core import summarize as summarize
