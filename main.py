"""
Demo: find the cheapest way to multiply a chain of matrices.

Usage:
    python main.py 400 300 30 500 400
    python main.py 10 20 10 --evaluate --log-level INFO

The positional arguments are the dimension vector p: operand i has shape
p[i] x p[i+1], so n+1 numbers describe a chain of n matrices.
"""

import argparse
import string
import sys
import time

import numpy as np

from matexpr import (
    make_leaf, evaluate, analyze, naive_chain, arrange_optimal_chain,
    multiplication_cost, render, configure_logging, ExecutionProfiler,
)
from matexpr import config

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_chain(dims, seed=0):
    """Creates random leaves A, B, C, ... for the dimension vector ``dims``."""
    rng = np.random.default_rng(seed)
    names = iter(string.ascii_uppercase)
    leaves = []
    for rows, cols in zip(dims, dims[1:]):
        label = next(names, f"M{len(leaves)}")
        leaves.append(make_leaf(rng.random((rows, cols)), label=label))
    return leaves


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Optimal matrix-chain ordering demo")
    parser.add_argument("dims", type=int, nargs="+",
                        help="dimension vector p; operand i is p[i] x p[i+1]")
    parser.add_argument("--evaluate", action="store_true",
                        help="also multiply random matrices both ways and time them")
    parser.add_argument("--seed", type=int, default=0, help="random seed for --evaluate")
    parser.add_argument("--log-level", default=config.DEFAULT_LOG_LEVEL, choices=LOG_LEVELS,
                        type=str.upper, help="matexpr logging level")
    args = parser.parse_args(argv)
    if len(args.dims) < 2:
        parser.error("need at least two dimensions to describe one matrix")
    if any(d <= 0 for d in args.dims):
        parser.error("dimensions must be positive")
    return args


def main(argv=None):
    args = parse_args(argv)
    configure_logging(level=args.log_level)

    leaves = build_chain(args.dims, seed=args.seed)
    naive = naive_chain(leaves)
    optimal = arrange_optimal_chain(leaves)

    print(f"Operands: {len(leaves)}")
    print(f"Naive:    {render(naive)}  cost={multiplication_cost(naive)}")
    print(f"Optimal:  {render(optimal)}  cost={multiplication_cost(optimal)}")
    for report in analyze(naive):
        print(f"Savings:  {report.savings} scalar multiplications")

    if args.evaluate:
        profiler = ExecutionProfiler()

        start_time = time.perf_counter()
        naive_result = evaluate(naive, optimize=False, profiler=profiler)
        naive_time = time.perf_counter() - start_time

        start_time = time.perf_counter()
        optimal_result = evaluate(naive, optimize=True, profiler=profiler)
        optimal_time = time.perf_counter() - start_time

        print(f"\nNaive evaluation:     {naive_time:.4f} s")
        print(f"Optimized evaluation: {optimal_time:.4f} s")
        print(f"Results agree: {np.allclose(naive_result, optimal_result)}")
        profiler.print_summary()

    return 0


if __name__ == "__main__":
    sys.exit(main())
