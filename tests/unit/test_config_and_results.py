"""
Unit tests for engine configuration, metrics and job results
"""

import json
import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from chunkmr.config import EngineConfig
from chunkmr.errors import ReduceError, SourceError, Stage
from chunkmr.metrics import JobMetrics, MetricsCollector
from chunkmr.results import JobResult, JobStatus, StageFailure


class TestEngineConfig:
    """Tests for configuration validation and pool creation"""

    def test_defaults_are_positive(self):
        config = EngineConfig()
        assert config.map_workers >= 1
        assert config.reduce_workers >= 1

    @pytest.mark.parametrize("field_name", ["map_workers", "reduce_workers"])
    def test_rejects_non_positive_workers(self, field_name):
        with pytest.raises(ValueError):
            EngineConfig(**{field_name: 0})

    def test_pools_are_fresh_and_sized(self):
        config = EngineConfig(map_workers=2, reduce_workers=3)

        with config.map_pool() as first, config.map_pool() as second:
            assert first is not second
            assert isinstance(first, ThreadPoolExecutor)
            assert first._max_workers == 2

        with config.reduce_pool() as pool:
            assert pool._max_workers == 3


class TestMetrics:
    """Tests for metrics collection"""

    def test_phase_times_are_ordered(self):
        collector = MetricsCollector()
        collector.start_job(num_sources=2)
        collector.end_map_phase(num_entries=10)
        collector.end_shuffle_phase(num_groups=4, num_chunks=2)
        collector.end_job(chunks_written=2)

        metrics = collector.get_metrics()
        assert metrics.num_sources == 2
        assert metrics.num_entries == 10
        assert metrics.num_groups == 4
        assert metrics.chunks_written == 2
        assert metrics.total_time_seconds >= 0
        assert metrics.map_phase_time_seconds >= 0
        assert metrics.reduce_phase_time_seconds >= 0
        assert metrics.peak_rss_bytes > 0

    def test_disabled_collector_skips_memory_sampling(self):
        collector = MetricsCollector(enabled=False)
        collector.start_job(num_sources=1)
        assert collector.get_metrics().peak_rss_bytes == 0

    def test_save_to_file(self, temp_dir):
        metrics = JobMetrics(start_time=1.0, end_time=3.5, num_entries=7)
        path = os.path.join(temp_dir, 'metrics.json')

        metrics.save_to_file(path)

        with open(path) as f:
            data = json.load(f)
        assert data['num_entries'] == 7
        assert data['total_time_seconds'] == 2.5


class TestJobResult:
    """Tests for the run result"""

    def test_success_message(self):
        result = JobResult(status=JobStatus.COMPLETED)
        assert result.succeeded
        assert result.message == "MapReduce completed successfully."
        result.raise_for_status()

    def test_failure_carries_stage_context(self):
        error = ReduceError("Reduce failed: boom", chunk_index=2, key='2024-01-01')
        result = JobResult(status=JobStatus.FAILED, failure=StageFailure.from_error(error))

        assert not result.succeeded
        assert result.failure.stage == Stage.REDUCE
        assert result.failure.chunk_index == 2
        assert result.failure.key == '2024-01-01'
        assert result.message.startswith("MapReduce failed: reduce stage: Reduce failed: boom")

    def test_raise_for_status_reraises(self):
        error = SourceError("Failed to list files", source='clicks')
        result = JobResult(status=JobStatus.FAILED, failure=StageFailure.from_error(error))

        with pytest.raises(SourceError):
            result.raise_for_status()
