"""
Observability utilities for matexpr.

This module provides:
- Logging configuration for the ``matexpr`` logger hierarchy
- An execution profiler the evaluator reports kernel calls to
"""

import logging
import time
import functools
import json
from contextlib import contextmanager
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from collections import defaultdict

from .config import DEFAULT_LOG_LEVEL, LOG_FORMAT, DETAILED_LOG_FORMAT, LOG_DATE_FORMAT


# ============================================================================
# Logging Configuration
# ============================================================================

def configure_logging(level: str = DEFAULT_LOG_LEVEL, log_file: Optional[str] = None):
    """
    Configure logging for matexpr.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; the file always receives DEBUG records
    """
    log_level = getattr(logging, level.upper())

    package_logger = logging.getLogger('matexpr')
    package_logger.setLevel(logging.DEBUG if log_file else log_level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        package_logger.addHandler(file_handler)

    # Prevent propagation to root logger
    package_logger.propagate = False

    return package_logger


# ============================================================================
# Execution Profiling
# ============================================================================

@dataclass
class ProfileEntry:
    """Single kernel (or user-defined block) measurement."""
    name: str
    start_time: float
    end_time: Optional[float] = None
    duration: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def complete(self):
        self.end_time = time.perf_counter()
        self.duration = self.end_time - self.start_time

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'duration': self.duration,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'metadata': self.metadata
        }


class ExecutionProfiler:
    """
    Records how long each evaluation step takes and how much work it did.

    The evaluator opens one ``profile()`` block per kernel call and attaches
    the operand shapes and the number of scalar multiplications as metadata.

    Example:
        profiler = ExecutionProfiler()
        evaluate(expr, profiler=profiler)
        profiler.print_summary()
    """

    def __init__(self):
        self.entries: List[ProfileEntry] = []
        self.aggregated: Dict[str, List[float]] = defaultdict(list)
        self._enabled = True

    @contextmanager
    def profile(self, name: str, **metadata):
        """
        Context manager for profiling a code block.

        Args:
            name: Name of the operation being profiled
            **metadata: Additional metadata to attach
        """
        if not self._enabled:
            yield None
            return

        entry = ProfileEntry(name=name, start_time=time.perf_counter(), metadata=metadata)
        try:
            yield entry
        finally:
            entry.complete()
            self.entries.append(entry)
            self.aggregated[name].append(entry.duration)

    def profile_decorator(self, name: Optional[str] = None):
        """Decorator form of profile()."""
        def decorator(func):
            profile_name = name or f"{func.__module__}.{func.__name__}"

            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with self.profile(profile_name):
                    return func(*args, **kwargs)
            return wrapper
        return decorator

    def total_scalar_multiplications(self) -> int:
        """Sum of the ``scalar_multiplications`` metadata over all entries."""
        return sum(entry.metadata.get('scalar_multiplications', 0) for entry in self.entries)

    def get_summary(self) -> Dict[str, Dict[str, float]]:
        """
        Get aggregated statistics for all profiled operations.

        Returns:
            Dictionary mapping operation names to count/total/mean/min/max
        """
        summary = {}
        for name, durations in self.aggregated.items():
            if durations:
                summary[name] = {
                    'count': len(durations),
                    'total': sum(durations),
                    'mean': sum(durations) / len(durations),
                    'min': min(durations),
                    'max': max(durations)
                }
        return summary

    def print_summary(self):
        summary = self.get_summary()

        print("\n" + "=" * 72)
        print("EVALUATION PROFILE SUMMARY")
        print("=" * 72)
        print(f"{'Operation':<32} {'Count':>8} {'Total (s)':>14} {'Mean (s)':>14}")
        print("-" * 72)
        for name, stats in sorted(summary.items(), key=lambda x: x[1]['total'], reverse=True):
            print(f"{name:<32} {stats['count']:>8} {stats['total']:>14.6f} {stats['mean']:>14.6f}")
        print("-" * 72)
        print(f"Scalar multiplications: {self.total_scalar_multiplications()}")
        print("=" * 72 + "\n")

    def save_json(self, filepath: str):
        """Save profiling results to a JSON file."""
        data = {
            'summary': self.get_summary(),
            'scalar_multiplications': self.total_scalar_multiplications(),
            'entries': [entry.to_dict() for entry in self.entries]
        }
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)

    def reset(self):
        self.entries.clear()
        self.aggregated.clear()

    def enable(self):
        self._enabled = True

    def disable(self):
        self._enabled = False


# Global profiler instance
_global_profiler = ExecutionProfiler()


def get_profiler() -> ExecutionProfiler:
    """Get the global profiler instance."""
    return _global_profiler
