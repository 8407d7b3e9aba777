# benchmarks/chain_order.py
import os
import sys

import numpy as np

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from matexpr import evaluate, naive_chain
from benchmarks.utils import create_chain
from benchmarks.utils import Benchmark

# --- Benchmark Configuration ---
# A chain where left-to-right order builds a large 2000 x 2000 intermediate
DIMS = [2000, 1500, 50, 2000, 1500, 40]


def run_benchmark(dims=DIMS):
    """
    Compares left-to-right evaluation of a matrix chain with evaluation of
    its optimal parenthesization across time, memory, CPU and work done.
    """
    plan = naive_chain(create_chain(dims))

    with Benchmark("Naive Execution: left to right") as naive:
        naive_result = evaluate(plan, optimize=False, profiler=naive.profiler)

    with Benchmark("Optimized Execution: optimal parenthesization") as optimized:
        optimal_result = evaluate(plan, optimize=True, profiler=optimized.profiler)

    naive_stats = naive.results()
    optimal_stats = optimized.results()

    print("\n" + "=" * 58)
    print("                  BENCHMARK RESULTS")
    print("=" * 58)
    print(f"{'Metric':<24} | {'Naive':>14} | {'Optimized':>14}")
    print("-" * 58)
    print(f"{'Scalar mults':<24} | {naive_stats['mults']:>14,} | {optimal_stats['mults']:>14,}")
    print(f"{'Kernel calls':<24} | {naive_stats['kernels']:>14} | {optimal_stats['kernels']:>14}")
    print(f"{'Time (s)':<24} | {naive_stats['time']:>14.4f} | {optimal_stats['time']:>14.4f}")
    print(f"{'Memory growth (MB)':<24} | {naive_stats['mem']:>14.1f} | {optimal_stats['mem']:>14.1f}")
    print(f"{'Avg CPU (%)':<24} | {naive_stats['cpu']:>14.1f} | {optimal_stats['cpu']:>14.1f}")
    print("=" * 58)
    print(f"Results agree: {np.allclose(naive_result, optimal_result)}")
    return naive_stats, optimal_stats


if __name__ == "__main__":
    run_benchmark()
