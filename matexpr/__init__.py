"""
matexpr: matrix expression trees with optimal multiplication ordering.

Wrap matrices with ``make_leaf``, combine them with ``@`` and ``+``, and
call ``evaluate``; every multiplication chain is re-parenthesized to use the
fewest scalar multiplications before anything is computed.
"""

from .errors import DimensionMismatch
from .plan import (
    MatrixExpr, LeafNode, ProductNode, SumNode,
    make_leaf, multiply, add, dimensions, render, count_chain_operands,
)
from .optimizer import (
    ChainTable, ChainReport,
    flatten_chain, chain_cost_table, arrange_optimal_chain, optimize,
    multiplication_cost, naive_chain, analyze,
)
from .evaluator import evaluate
from .observability import configure_logging, get_profiler, ExecutionProfiler

__version__ = "0.1.0"
