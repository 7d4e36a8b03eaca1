# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

# pylint: disable=unused-import
from .base import registry as registry
from .base import ConfiguredOptimizer as ConfiguredOptimizer
from .sociallearning import SocialLearning as SocialLearning


# reference settings: 30 individuals, 15 models
SLA = SocialLearning().set_name("SLA", register=True)
LargeSLA = SocialLearning(popsize=100).set_name("LargeSLA", register=True)
SmallEliteSLA = SocialLearning(elite_size=5).set_name("SmallEliteSLA", register=True)
# exploration variants
SLAImitationOnly = SocialLearning(p_imitation=1.0).set_name("SLAImitationOnly", register=True)
SLANoImitation = SocialLearning(p_imitation=0.0).set_name("SLANoImitation", register=True)
