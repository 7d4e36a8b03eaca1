# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import argparse
from concurrent import futures
import pandas as pd
import sociallearning.common.typing as tp
from ..functions import ArtificialFunction
from ..functions import corefuncs
from ..optimization.optimizerlib import registry as optimizer_registry
from . import core
from .xpbase import Experiment


# pylint: disable=too-many-arguments
def launch(
    function: str,
    dimension: int = 30,
    budget: int = 300000,
    num_trials: int = 30,
    lower: float = -100.0,
    upper: float = 100.0,
    optimizer: str = "SLA",
    seed: tp.Optional[int] = None,
    num_workers: int = 1,
    output: tp.Optional[tp.PathLike] = None,
) -> pd.DataFrame:
    """Runs independent trials of an optimizer on a function, prints the best fitness of
    each trial and a summary, and optionally saves the results to a csv file
    """
    func = ArtificialFunction(function, dimension=dimension, lower=lower, upper=upper)
    experiment = Experiment(func, optimizer, budget=budget, num_trials=num_trials, seed=seed)
    if num_workers == 1:
        df = core.compute(experiment)
    else:
        with futures.ProcessPoolExecutor(max_workers=num_workers) as executor:
            df = core.compute(experiment, executor=executor)
    for loss in df["loss"]:
        print(f"{loss:g}")
    print(core.summarize(df).to_string(index=False))
    if output is not None:
        core.save_or_append_to_csv(df, output)
        print(f"Saved data to {output}")
    return df


def get_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run independent trials of an optimizer on a test function.")
    parser.add_argument("function", type=str, choices=sorted(corefuncs.registry), help="name of the test function")
    parser.add_argument("--dimension", type=int, default=30, help="dimension of the search space")
    parser.add_argument("--budget", type=int, default=300000, help="maximum number of evaluations per trial")
    parser.add_argument("--trials", type=int, default=30, help="number of independent trials")
    parser.add_argument("--lower", type=float, default=-100.0, help="lower bound of every variable")
    parser.add_argument("--upper", type=float, default=100.0, help="upper bound of every variable")
    parser.add_argument(
        "--optimizer", type=str, default="SLA", choices=sorted(optimizer_registry), help="registered optimizer"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Use a seed for reproducibility (each trial is seeded from it)"
    )
    parser.add_argument(
        "--num_workers", type=int, default=1, help="Numbers of processes to use for running the trials"
    )
    parser.add_argument(
        "--output", type=str, default=None, help="Output path for the CSV file (existing files are appended)"
    )
    parser.add_argument(
        "--verbosity", type=int, default=0, help="0: warnings only, 1: trial information, 2: generation details"
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = get_args()
    logging.basicConfig(
        level={0: logging.WARNING, 1: logging.INFO}.get(args.verbosity, logging.DEBUG),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    launch(
        args.function,
        dimension=args.dimension,
        budget=args.budget,
        num_trials=args.trials,
        lower=args.lower,
        upper=args.upper,
        optimizer=args.optimizer,
        seed=args.seed,
        num_workers=args.num_workers,
        output=args.output,
    )
