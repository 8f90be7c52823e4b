"""
chunkmr: single-machine, in-memory MapReduce with chunked parallel reduce.
"""

from chunkmr.config import EngineConfig
from chunkmr.data_manager import CSVDataManager, DataManager, InMemoryDataManager
from chunkmr.engine import MapReduce
from chunkmr.errors import (MapReduceError, MapperError, ReduceError, ShuffleError,
                            SourceError, Stage, WriteError)
from chunkmr.models import Chunk, Group, SourceDescriptor
from chunkmr.results import JobResult, JobStatus, StageFailure

__version__ = "0.1.0"
