#!/usr/bin/env python3
"""
Reduce Executor
Reduces and serializes every chunk in parallel and hands the resulting
lines to the data manager, one output per chunk
"""

import time
import logging
from concurrent.futures import Executor, as_completed
from dataclasses import dataclass, field
from typing import List, Optional

from chunkmr.data_manager import DataManager, drop_blank_lines
from chunkmr.errors import MapReduceError, ReduceError, WriteError
from chunkmr.models import Chunk, ReduceFunc

logger = logging.getLogger(__name__)


@dataclass
class ReduceOutcome:
    """What happened to the chunks of one reduce phase"""
    chunks_written: List[int] = field(default_factory=list)
    chunks_skipped: List[int] = field(default_factory=list)
    error: Optional[MapReduceError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def reduce_chunk(data_manager: DataManager, reduce_fn: ReduceFunc, chunk: Chunk) -> List[str]:
    """
    Reduce and serialize every group of a chunk, in group order

    Args:
        data_manager: Adapter providing the serialize function
        reduce_fn: (key, values) -> reduced values
        chunk: Chunk to process

    Returns:
        Serialized lines of all groups, concatenated

    Raises:
        ReduceError: If the reduce or serialize function raises for a key
    """
    lines = []
    for group in chunk.groups:
        try:
            reduced = list(reduce_fn(group.key, group.values) or ())
            lines.extend(data_manager.serialize(group.key, reduced))
        except Exception as e:
            raise ReduceError(f"Reduce failed: {e}",
                              chunk_index=chunk.index, key=group.key) from e
    return lines


def process_chunk(data_manager: DataManager, reduce_fn: ReduceFunc,
                  chunk: Chunk, destination) -> bool:
    """
    Reduce one chunk and write its output

    Returns:
        True if the chunk was written, False if its output was empty

    Raises:
        ReduceError: If reduction or serialization fails
        WriteError: If the data manager cannot persist the lines
    """
    lines = drop_blank_lines(reduce_chunk(data_manager, reduce_fn, chunk))
    if not lines:
        logger.debug(f"Chunk {chunk.index} produced no output, skipping write")
        return False

    try:
        data_manager.write(destination, chunk.index, lines)
    except Exception as e:
        raise WriteError(f"Failed to write chunk: {e}", chunk_index=chunk.index) from e

    logger.debug(f"Chunk {chunk.index}: wrote {len(lines)} lines from {len(chunk)} groups")
    return True


class ReduceExecutor:
    """Runs the reduce phase: chunks in parallel, groups within a chunk in order"""

    def __init__(self, data_manager: DataManager, reduce_fn: ReduceFunc, pool: Executor):
        """
        Initialize the reduce executor

        Args:
            data_manager: Adapter used to serialize and write chunk output
            reduce_fn: (key, values) -> reduced values
            pool: Worker pool used for chunk-level parallelism
        """
        self.data_manager = data_manager
        self.reduce_fn = reduce_fn
        self.pool = pool

    def execute(self, chunks: List[Chunk], destination) -> ReduceOutcome:
        """
        Process all chunks in parallel

        The first failure cancels chunks that haven't started yet. Chunks
        already running are allowed to finish, and whatever they wrote is
        kept and reported.

        Args:
            chunks: Chunks from the chunker
            destination: Output location passed through to the data manager

        Returns:
            ReduceOutcome listing written and skipped chunks and the first error
        """
        start_time = time.time()
        outcome = ReduceOutcome()

        future_to_chunk = {
            self.pool.submit(process_chunk, self.data_manager, self.reduce_fn, chunk, destination): chunk
            for chunk in chunks
        }

        for future in as_completed(future_to_chunk):
            if future.cancelled():
                continue
            chunk = future_to_chunk[future]
            try:
                written = future.result()
            except Exception as e:
                if not isinstance(e, MapReduceError):
                    e = ReduceError(str(e), chunk_index=chunk.index)
                if outcome.error is None:
                    logger.error(f"Chunk {chunk.index} failed: {e.describe()}")
                    outcome.error = e
                    for pending in future_to_chunk:
                        pending.cancel()
                else:
                    logger.error(f"Chunk {chunk.index} also failed: {e.describe()}")
                continue

            if written:
                outcome.chunks_written.append(chunk.index)
            else:
                outcome.chunks_skipped.append(chunk.index)

        outcome.chunks_written.sort()
        outcome.chunks_skipped.sort()

        execution_time = int((time.time() - start_time) * 1000)
        logger.info(f"Reduce phase wrote {len(outcome.chunks_written)} of {len(chunks)} chunks in {execution_time}ms")
        return outcome
