# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import inspect
import typing as tp


def non_default_settings(cls: tp.Type[tp.Any], settings: tp.Dict[str, tp.Any]) -> tp.Dict[str, tp.Any]:
    """Settings which differ from the defaults of the class constructor

    Parameters
    ----------
    cls: type
        the class whose :code:`__init__` signature provides the defaults
    settings: dict
        the settings the instance was created with (typically its :code:`locals()`)

    Returns
    -------
    dict
        the settings with non-default values, private ones excluded

    Note
    ----
    This is convenient for short repr of configurations. Settings and constructor
    parameters must match exactly, which helps catching mistakes while writing new families.
    """
    defaults = {
        name: param.default
        for name, param in inspect.signature(cls.__init__).parameters.items()
        if name not in ["self", "__class__"]
    }
    mismatches = set(defaults).symmetric_difference(settings)
    if mismatches:
        raise RuntimeError(f"Mismatch between settings and arguments of {cls.__name__}: {mismatches}")
    return {name: settings[name] for name, default in defaults.items() if default != settings[name] and not name.startswith("_")}
