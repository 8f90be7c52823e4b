"""
Performance metrics collection for MapReduce runs.
"""

import time
import json
from dataclasses import dataclass, asdict

import psutil


def current_rss_bytes() -> int:
    """Resident set size of this process"""
    return psutil.Process().memory_info().rss


@dataclass
class JobMetrics:
    """Metrics for a single MapReduce run."""

    start_time: float = 0.0
    end_time: float = 0.0
    map_phase_start: float = 0.0
    map_phase_end: float = 0.0
    shuffle_phase_start: float = 0.0
    shuffle_phase_end: float = 0.0
    reduce_phase_start: float = 0.0
    reduce_phase_end: float = 0.0
    num_sources: int = 0
    num_entries: int = 0
    num_groups: int = 0
    num_chunks: int = 0
    chunks_written: int = 0
    peak_rss_bytes: int = 0

    @property
    def total_time_seconds(self) -> float:
        """Total run time in seconds."""
        return self.end_time - self.start_time

    @property
    def map_phase_time_seconds(self) -> float:
        """Map phase execution time in seconds."""
        return self.map_phase_end - self.map_phase_start

    @property
    def shuffle_phase_time_seconds(self) -> float:
        """Shuffle/sort/chunk time in seconds."""
        return self.shuffle_phase_end - self.shuffle_phase_start

    @property
    def reduce_phase_time_seconds(self) -> float:
        """Reduce and write time in seconds."""
        return self.reduce_phase_end - self.reduce_phase_start

    def to_dict(self) -> dict:
        """Convert metrics to dictionary."""
        data = asdict(self)
        data['total_time_seconds'] = self.total_time_seconds
        data['map_phase_time_seconds'] = self.map_phase_time_seconds
        data['shuffle_phase_time_seconds'] = self.shuffle_phase_time_seconds
        data['reduce_phase_time_seconds'] = self.reduce_phase_time_seconds
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


class MetricsCollector:
    """Records phase boundaries and counts for one run."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.metrics = JobMetrics()

    def _sample_memory(self):
        if self.enabled:
            self.metrics.peak_rss_bytes = max(self.metrics.peak_rss_bytes, current_rss_bytes())

    def start_job(self, num_sources: int):
        """Initialize metrics tracking for a new run."""
        now = time.time()
        self.metrics.start_time = now
        self.metrics.map_phase_start = now
        self.metrics.num_sources = num_sources
        self._sample_memory()

    def end_map_phase(self, num_entries: int):
        """Mark the end of the map phase and the start of the shuffle."""
        now = time.time()
        self.metrics.map_phase_end = now
        self.metrics.shuffle_phase_start = now
        self.metrics.num_entries = num_entries
        self._sample_memory()

    def end_shuffle_phase(self, num_groups: int, num_chunks: int):
        """Mark the end of shuffle/sort/chunk and the start of the reduce phase."""
        now = time.time()
        self.metrics.shuffle_phase_end = now
        self.metrics.reduce_phase_start = now
        self.metrics.num_groups = num_groups
        self.metrics.num_chunks = num_chunks
        self._sample_memory()

    def end_job(self, chunks_written: int):
        """Mark run completion."""
        now = time.time()
        if self.metrics.reduce_phase_start:
            self.metrics.reduce_phase_end = now
        self.metrics.end_time = now
        self.metrics.chunks_written = chunks_written
        self._sample_memory()

    def get_metrics(self) -> JobMetrics:
        """Retrieve metrics for the run."""
        return self.metrics
