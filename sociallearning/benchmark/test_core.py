# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from pathlib import Path
import typing as tp
import pandas as pd
from ..functions import ArtificialFunction
from ..optimization import optimizerlib
from . import core
from . import xpbase
from .__main__ import launch


def test_compute_and_summarize(tmp_path: Path) -> None:
    func = ArtificialFunction("sphere", dimension=2, lower=-10, upper=10)
    xp = xpbase.Experiment(func, optimizerlib.SLANoImitation, budget=90, num_trials=3, seed=12)
    df = core.compute(xp)
    assert isinstance(df, pd.DataFrame)
    assert len(df) == 3
    assert set(df.columns) >= {"loss", "trial", "seed", "elapsed_budget", "optimizer_name", "function", "error"}
    summary = core.summarize(df)
    assert len(summary) == 1
    assert summary.loc[0, "count"] == 3
    assert summary.loc[0, "optimizer_name"] == "SLANoImitation"
    assert summary.loc[0, "min"] == df["loss"].min()
    filepath = tmp_path / "results.csv"
    core.save_or_append_to_csv(df, filepath)
    core.save_or_append_to_csv(df, filepath)
    assert len(pd.read_csv(filepath)) == 6


def test_summarize_skips_errors() -> None:
    df = pd.DataFrame(
        [
            dict(optimizer_name="SLA", function="sphere", dimension=2, budget=10, loss=1.0, error=""),
            dict(optimizer_name="SLA", function="sphere", dimension=2, budget=10, loss=3.0, error=None),
            dict(optimizer_name="SLA", function="sphere", dimension=2, budget=10, loss=0.0, error="ValueError"),
        ]
    )
    summary = core.summarize(df)
    assert summary.loc[0, "count"] == 2
    assert summary.loc[0, "mean"] == 2.0


def test_launch(tmp_path: Path, capsys: tp.Any) -> None:
    filepath = tmp_path / "sphere.csv"
    df = launch("sphere", dimension=2, budget=60, num_trials=2, lower=-10, upper=10, seed=12, output=filepath)
    assert len(df) == 2
    out = capsys.readouterr().out
    assert "Saved data to" in out
    assert "SLA" in out
    assert filepath.exists()
