#!/usr/bin/env python3
"""
MapReduce engine
Runs map -> shuffle/sort -> chunk -> reduce/write for one job on a single
machine, with all intermediate data held in memory.

Value order inside a group depends on the order in which map tasks finish.
Reduce functions must not depend on it unless EngineConfig.value_key is set.
"""

import logging
from typing import Any, Callable, Optional

from chunkmr.chunker import chunk_groups, validate_chunk_size
from chunkmr.config import EngineConfig
from chunkmr.data_manager import DataManager
from chunkmr.map_executor import MapExecutor
from chunkmr.metrics import MetricsCollector
from chunkmr.models import ReduceFunc, as_source_descriptors
from chunkmr.reduce_executor import ReduceExecutor
from chunkmr.results import JobResult, JobStatus, StageFailure
from chunkmr.shuffle import shuffle_and_sort

logger = logging.getLogger(__name__)


class MapReduce:
    """Single-machine, in-memory MapReduce engine"""

    def __init__(self, chunk_size: int, data_manager: DataManager,
                 sort_key: Optional[Callable[[Any], Any]] = None,
                 config: Optional[EngineConfig] = None):
        """
        Initialize the engine

        Args:
            chunk_size: Maximum number of groups reduced and written together
            data_manager: Source/sink adapter
            sort_key: Key function defining the order of groups; natural
                ordering of keys if None
            config: Worker pool sizes and other tunables

        Raises:
            ValueError: If chunk_size is not a positive integer
        """
        self.chunk_size = validate_chunk_size(chunk_size)
        self.data_manager = data_manager
        self.sort_key = sort_key
        self.config = config if config is not None else EngineConfig()

    def run(self, sources, reduce_fn: ReduceFunc, destination) -> JobResult:
        """
        Run a job

        Pools are created for this run only and shut down before returning.
        A failure stops the run, but chunks written before it stay on the sink
        and are listed in the result.

        Args:
            sources: Mapping of source path -> mapper, or SourceDescriptors
            reduce_fn: (key, values) -> reduced values
            destination: Output location handed to the data manager

        Returns:
            JobResult describing success or the failing stage
        """
        descriptors = as_source_descriptors(sources)
        collector = MetricsCollector(enabled=self.config.collect_metrics)
        collector.start_job(len(descriptors))
        result = JobResult(status=JobStatus.COMPLETED)

        logger.info(f"Starting MapReduce over {len(descriptors)} sources into {destination}")

        try:
            with self.config.map_pool() as pool:
                entries = MapExecutor(self.data_manager, pool).execute(descriptors)
            result.num_entries = len(entries)
            collector.end_map_phase(len(entries))

            groups = shuffle_and_sort(entries, sort_key=self.sort_key,
                                      value_key=self.config.value_key)
            del entries
            chunks = chunk_groups(groups, self.chunk_size)
            result.num_groups = len(groups)
            result.num_chunks = len(chunks)
            collector.end_shuffle_phase(len(groups), len(chunks))
            logger.info(f"Partitioned {len(groups)} groups into {len(chunks)} chunks of up to {self.chunk_size}")

            with self.config.reduce_pool() as pool:
                outcome = ReduceExecutor(self.data_manager, reduce_fn, pool).execute(chunks, destination)
            result.chunks_written = outcome.chunks_written
            if outcome.error is not None:
                raise outcome.error

        except Exception as e:
            result.status = JobStatus.FAILED
            result.failure = StageFailure.from_error(e)

        collector.end_job(len(result.chunks_written))
        if self.config.collect_metrics:
            result.metrics = collector.get_metrics()

        if result.succeeded:
            logger.info(result.message)
        else:
            logger.error(result.message)
        return result

    __call__ = run
