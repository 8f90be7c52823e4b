#!/usr/bin/env python3
"""
Map Executor
Lists the files of every configured source, applies the source's mapper
to each file's full batch of records and merges the emitted entries
"""

import time
import logging
from concurrent.futures import Executor, as_completed
from typing import List

from chunkmr.data_manager import DataManager
from chunkmr.errors import MapReduceError, MapperError, SourceError
from chunkmr.models import Entry, SourceDescriptor

logger = logging.getLogger(__name__)


def map_file(data_manager: DataManager, source: SourceDescriptor, file_id) -> List[Entry]:
    """
    Read one file and run the source's mapper over its records

    Args:
        data_manager: Adapter used to read the file
        source: Source the file belongs to
        file_id: Identifier returned by list_files

    Returns:
        List of (key, value) entries emitted by the mapper

    Raises:
        SourceError: If the records cannot be read
        MapperError: If the mapper raises or emits something other than pairs
    """
    try:
        records = data_manager.read_records(file_id)
    except Exception as e:
        raise SourceError(f"Failed to read {file_id}: {e}",
                          source=source.path, file_id=file_id) from e

    try:
        entries = []
        for entry in source.mapper(records) or ():
            if not isinstance(entry, (tuple, list)) or len(entry) != 2:
                raise TypeError(f"expected a (key, value) pair, got {entry!r}")
            key, value = entry
            entries.append((key, value))
    except Exception as e:
        raise MapperError(f"Mapper failed on {file_id}: {e}",
                          source=source.path, file_id=file_id) from e

    logger.debug(f"Mapped {len(records)} records from {file_id} into {len(entries)} entries")
    return entries


class MapExecutor:
    """Runs the map phase: sources one after another, files in parallel"""

    def __init__(self, data_manager: DataManager, pool: Executor):
        """
        Initialize the map executor

        Args:
            data_manager: Adapter used to list and read source files
            pool: Worker pool used for file-level parallelism
        """
        self.data_manager = data_manager
        self.pool = pool

    def list_source_files(self, source: SourceDescriptor) -> list:
        try:
            return list(self.data_manager.list_files(source.path))
        except Exception as e:
            raise SourceError(f"Failed to list files: {e}", source=source.path) from e

    def map_source(self, source: SourceDescriptor) -> List[Entry]:
        """
        Map every file of one source in parallel

        Entries are merged in completion order, so their relative order is
        not deterministic across runs.

        Args:
            source: Source to process

        Returns:
            Entries from all files of the source
        """
        file_ids = self.list_source_files(source)
        logger.info(f"Source {source.path}: mapping {len(file_ids)} files")

        futures = [
            self.pool.submit(map_file, self.data_manager, source, file_id)
            for file_id in file_ids
        ]

        entries = []
        try:
            for future in as_completed(futures):
                entries.extend(future.result())
        except Exception as e:
            for future in futures:
                future.cancel()
            if isinstance(e, MapReduceError):
                raise
            raise SourceError(f"Map task failed: {e}", source=source.path) from e

        return entries

    def execute(self, sources: List[SourceDescriptor]) -> List[Entry]:
        """
        Run the map phase over all sources

        Args:
            sources: Source descriptors, processed in order

        Returns:
            Unordered list of all entries from all sources

        Raises:
            SourceError: If listing or reading any file fails
            MapperError: If any mapper fails
        """
        start_time = time.time()
        merged = []

        for source in sources:
            entries = self.map_source(source)
            logger.info(f"Source {source.path}: produced {len(entries)} entries")
            merged.extend(entries)

        execution_time = int((time.time() - start_time) * 1000)
        logger.info(f"Map phase produced {len(merged)} entries from {len(sources)} sources in {execution_time}ms")
        return merged
