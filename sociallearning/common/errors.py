# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.


# base classes


class SocialLearningError(Exception):
    """Base class for error raised by sociallearning"""


class SocialLearningWarning(Warning):
    pass


# errors
# pylint: disable=too-many-ancestors


class SocialLearningEarlyStopping(StopIteration, SocialLearningError):
    """Stops the minimization loop if raised"""


class SocialLearningRuntimeError(RuntimeError, SocialLearningError):
    """Runtime error raised by sociallearning"""


class ConfigurationError(ValueError, SocialLearningError):
    """Invalid optimizer or function settings, raised before any evaluation"""


class UnknownFunctionError(KeyError, SocialLearningError):
    """Requested objective function is not registered"""


# warnings


class SocialLearningRuntimeWarning(RuntimeWarning, SocialLearningWarning):
    """Runtime warning raise by sociallearning"""


class InefficientSettingsWarning(SocialLearningRuntimeWarning):
    """Optimization settings are not optimal for the optimizer"""


class BadFitnessWarning(SocialLearningRuntimeWarning):
    """Provided fitness is not finite"""
