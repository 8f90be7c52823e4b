"""
Result of a MapReduce run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from chunkmr.errors import MapReduceError, Stage


class JobStatus(Enum):
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StageFailure:
    """Where and why a run failed"""
    stage: Stage
    message: str
    error: BaseException
    source: Any = None
    chunk_index: Optional[int] = None
    key: Any = None
    file_id: Any = None

    @classmethod
    def from_error(cls, error: BaseException) -> "StageFailure":
        """Build a failure record from an exception raised during a run"""
        if isinstance(error, MapReduceError):
            return cls(stage=error.stage, message=error.describe(), error=error,
                       source=error.source, chunk_index=error.chunk_index, key=error.key,
                       file_id=error.file_id)
        return cls(stage=None, message=str(error), error=error)


@dataclass
class JobResult:
    """Outcome of one run, including chunks already written before any failure"""
    status: JobStatus
    chunks_written: List[int] = field(default_factory=list)
    num_entries: int = 0
    num_groups: int = 0
    num_chunks: int = 0
    failure: Optional[StageFailure] = None
    metrics: Any = None

    @property
    def succeeded(self) -> bool:
        return self.status == JobStatus.COMPLETED

    @property
    def message(self) -> str:
        """Single terminal status line for the run"""
        if self.succeeded:
            return "MapReduce completed successfully."
        return f"MapReduce failed: {self.failure.message}"

    def raise_for_status(self):
        """Re-raise the error that failed the run, if any"""
        if self.failure is not None:
            raise self.failure.error
