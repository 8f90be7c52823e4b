"""
Exception hierarchy for MapReduce runs.
Every error carries the stage it was raised in plus whatever context
(source, chunk, key) was known at the point of failure.
"""

from enum import Enum


class Stage(Enum):
    """Pipeline stage in which a failure occurred"""
    MAP = "map"
    SHUFFLE = "shuffle"
    REDUCE = "reduce"
    WRITE = "write"


class MapReduceError(Exception):
    """Base class for all failures raised while running a job"""

    stage = None

    def __init__(self, message, source=None, chunk_index=None, key=None, file_id=None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.file_id = file_id
        self.chunk_index = chunk_index
        self.key = key

    def describe(self) -> str:
        """Human readable description including stage context"""
        context = []
        if self.source is not None:
            context.append(f"source={self.source}")
        if self.file_id is not None:
            context.append(f"file={self.file_id}")
        if self.chunk_index is not None:
            context.append(f"chunk={self.chunk_index}")
        if self.key is not None:
            context.append(f"key={self.key!r}")
        suffix = f" ({', '.join(context)})" if context else ""
        return f"{self.stage.value} stage: {self.message}{suffix}"


class SourceError(MapReduceError):
    """Listing files or reading records for a source failed"""
    stage = Stage.MAP


class MapperError(MapReduceError):
    """A mapper function raised while processing a file"""
    stage = Stage.MAP


class ShuffleError(MapReduceError):
    """Grouping or sorting of mapped entries failed"""
    stage = Stage.SHUFFLE


class ReduceError(MapReduceError):
    """Reduction or serialization failed for a key in a chunk"""
    stage = Stage.REDUCE


class WriteError(MapReduceError):
    """Persisting a chunk's lines failed"""
    stage = Stage.WRITE
