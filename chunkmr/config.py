"""
Engine configuration.
Worker pools are sized here and created fresh for every run.
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import psutil

DEFAULT_WORKERS = 4


def default_worker_count() -> int:
    """Logical CPU count, or DEFAULT_WORKERS when it cannot be determined"""
    return psutil.cpu_count() or DEFAULT_WORKERS


@dataclass
class EngineConfig:
    """Tunables for a MapReduce engine instance"""
    map_workers: int = field(default_factory=default_worker_count)
    reduce_workers: int = field(default_factory=default_worker_count)
    executor_factory: Callable[[int], Executor] = ThreadPoolExecutor
    # Secondary sort applied to the values of each group before reduction
    value_key: Optional[Callable[[Any], Any]] = None
    collect_metrics: bool = True

    def __post_init__(self):
        if self.map_workers < 1:
            raise ValueError(f"map_workers must be positive, got {self.map_workers}")
        if self.reduce_workers < 1:
            raise ValueError(f"reduce_workers must be positive, got {self.reduce_workers}")

    def map_pool(self) -> Executor:
        return self.executor_factory(self.map_workers)

    def reduce_pool(self) -> Executor:
        return self.executor_factory(self.reduce_workers)
