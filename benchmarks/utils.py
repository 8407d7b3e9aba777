# benchmarks/utils.py
import numpy as np
import os
import time
import sys
import threading
import psutil

# Add the project root to the Python path to allow importing 'matexpr'
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from matexpr import make_leaf, ExecutionProfiler


def create_chain(dims, seed=42, dtype=np.float64):
    """Creates one random leaf per adjacent pair of ``dims`` (operand i is dims[i] x dims[i+1])."""
    rng = np.random.default_rng(seed)
    return [
        make_leaf(rng.random((rows, cols)).astype(dtype), label=f"M{i}")
        for i, (rows, cols) in enumerate(zip(dims, dims[1:]))
    ]


class MemorySampler(threading.Thread):
    """
    Samples the resident memory and CPU load of a process while a chain is
    evaluated. Memory is reported as growth over the RSS at start, which is
    what the intermediate products of an evaluation allocate.
    """
    def __init__(self, process, interval=0.05):
        super().__init__(daemon=True)
        self.process = process
        self.interval = interval
        self.baseline_mb = process.memory_info().rss / (1024 * 1024)
        self.peak_mb = self.baseline_mb
        self.cpu_percents = []
        self._stop_event = threading.Event()

    def run(self):
        while not self._stop_event.is_set():
            try:
                self.peak_mb = max(self.peak_mb, self.process.memory_info().rss / (1024 * 1024))
                # cpu_percent blocks for the interval
                self.cpu_percents.append(self.process.cpu_percent(interval=self.interval))
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                break

    def stop(self):
        """Stops sampling; returns (peak memory growth in MB, average CPU %)."""
        self._stop_event.set()
        self.join()
        avg_cpu = sum(self.cpu_percents) / len(self.cpu_percents) if self.cpu_percents else 0.0
        return self.peak_mb - self.baseline_mb, avg_cpu


class Benchmark:
    """
    Context manager for one evaluation run.

    Hand ``profiler`` to ``evaluate()`` inside the block; on exit the run's
    wall time, memory growth, CPU load, kernel calls and scalar
    multiplications are collected.
    """
    def __init__(self, description, profiler=None):
        self.description = description
        self.profiler = profiler if profiler is not None else ExecutionProfiler()
        self.sampler = None
        self.start_time = 0.0
        self.elapsed = 0.0
        self.memory_growth_mb = 0.0
        self.avg_cpu = 0.0
        self.kernel_calls = 0
        self.scalar_multiplications = 0

    def __enter__(self):
        print(f"\n--- Starting: {self.description} ---")
        self.sampler = MemorySampler(psutil.Process(os.getpid()))
        self.sampler.start()
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.elapsed = time.perf_counter() - self.start_time
        self.memory_growth_mb, self.avg_cpu = self.sampler.stop()
        self.kernel_calls = len(self.profiler.entries)
        self.scalar_multiplications = self.profiler.total_scalar_multiplications()
        print(f"--- Finished: {self.description} in {self.elapsed:.4f} seconds, "
              f"{self.scalar_multiplications:,} scalar multiplications ---")

    def results(self) -> dict:
        return {
            'time': self.elapsed,
            'mem': self.memory_growth_mb,
            'cpu': self.avg_cpu,
            'kernels': self.kernel_calls,
            'mults': self.scalar_multiplications,
        }
