"""
Simple demonstration of matexpr.

Builds (A * B * C * D) + E, shows how the optimizer regroups the chain and
evaluates the result.
"""

import os
import sys

import numpy as np

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from matexpr import make_leaf, evaluate, optimize, analyze, render, multiplication_cost, get_profiler


def main():
    print("=" * 60)
    print("matexpr: optimal matrix-chain evaluation")
    print("=" * 60)

    rng = np.random.default_rng(0)
    A = make_leaf(rng.random((400, 300)), label="A")
    B = make_leaf(rng.random((300, 30)), label="B")
    C = make_leaf(rng.random((30, 500)), label="C")
    D = make_leaf(rng.random((500, 400)), label="D")
    E = make_leaf(rng.random((400, 400)), label="E")

    expr = A @ B @ C @ D + E
    print(f"\nAs written: {render(expr)}")
    print(f"  cost: {multiplication_cost(expr):,} scalar multiplications")

    optimized = optimize(expr)
    print(f"Optimized:  {render(optimized)}")
    print(f"  cost: {multiplication_cost(optimized):,} scalar multiplications")

    for report in analyze(expr):
        print(f"\nChain of {report.operand_count}: saves {report.savings:,} multiplications")

    result = evaluate(expr)
    print(f"\nResult shape: {result.shape}")
    get_profiler().print_summary()


if __name__ == "__main__":
    main()
