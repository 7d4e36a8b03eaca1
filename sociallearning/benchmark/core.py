# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from pathlib import Path
import pandas as pd
import sociallearning.common.typing as tp
from .xpbase import Experiment as Experiment


def compute(experiment: Experiment, executor: tp.Optional[tp.ExecutorLike] = None) -> pd.DataFrame:
    """Runs all the trials of the experiment and returns the result dataframe.

    Parameters
    ----------
    experiment: Experiment
        the experiment to run
    executor: Executor-like object
        an object such as concurrent.futures.ProcessPoolExecutor for running trials in parallel

    Returns
    -------
    pd.DataFrame
        The dataframe summarizing all the trials (each trial is a line)
    """
    return pd.DataFrame(experiment.run(executor=executor))


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Statistics of the best fitness over the trials, for each optimizer/function setting
    (failed trials are excluded)
    """
    keys = [k for k in ["optimizer_name", "function", "dimension", "budget"] if k in df.columns]
    valid = df.loc[df["error"].fillna("") == "", :] if "error" in df.columns else df
    return valid.groupby(keys)["loss"].agg(["count", "mean", "std", "min", "max"]).reset_index()


def save_or_append_to_csv(df: pd.DataFrame, path: tp.PathLike) -> None:
    """Saves a dataframe to a file in append mode
    """
    path = Path(path)
    if path.exists():
        print("Appending to existing file")
        predf = pd.read_csv(str(path))
        df = pd.concat([predf, df], sort=False)
    df.to_csv(path, index=False)
