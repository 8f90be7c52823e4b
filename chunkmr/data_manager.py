"""
Source/sink adapters used by the engine.
The engine only talks to a DataManager: it lists files under a source,
reads a file's full batch of records, serializes reduced groups into
lines and writes the lines of one chunk to a destination.
"""

import csv
import os
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional

from chunkmr.models import Record, SerializeFunc

logger = logging.getLogger(__name__)

OUTPUT_FILE_TEMPLATE = "result-part-{index:03d}.csv"


def output_file_name(chunk_index: int) -> str:
    """Name of the output file for a 1-based chunk index"""
    return OUTPUT_FILE_TEMPLATE.format(index=chunk_index)


def drop_blank_lines(lines: Iterable[str]) -> List[str]:
    return [line for line in lines if line]


class DataManager(ABC):
    """Capability set the engine depends on: list, read, write, serialize"""

    def __init__(self, serialize_fn: SerializeFunc):
        self.serialize_fn = serialize_fn

    def serialize(self, key, values) -> List[str]:
        """Turn a key and its reduced values into output lines"""
        return list(self.serialize_fn(key, values))

    @abstractmethod
    def list_files(self, source_path) -> List[Any]:
        """Return the identifiers of every file under a source path"""

    @abstractmethod
    def read_records(self, file_id) -> List[Record]:
        """Read the full batch of records of one file"""

    @abstractmethod
    def write(self, destination, chunk_index: int, lines: List[str]):
        """Persist the non-blank lines of one chunk"""


class CSVDataManager(DataManager):
    """Reads header-prefixed CSV files from directories and writes CSV parts"""

    def __init__(self, serialize_fn: SerializeFunc, encoding: str = 'utf-8'):
        super().__init__(serialize_fn)
        self.encoding = encoding

    def list_files(self, source_path) -> List[str]:
        """
        List regular files directly under a source directory

        Args:
            source_path: Directory containing CSV files

        Returns:
            Sorted list of file paths

        Raises:
            FileNotFoundError: If the directory doesn't exist
            NotADirectoryError: If the path is not a directory
        """
        root = os.fspath(source_path)
        entries = sorted(os.listdir(root))
        return [
            os.path.join(root, name)
            for name in entries
            if os.path.isfile(os.path.join(root, name))
        ]

    def read_records(self, file_id) -> List[Dict[str, str]]:
        with open(file_id, 'r', encoding=self.encoding, newline='') as f:
            return [dict(row) for row in csv.DictReader(f)]

    def write(self, destination, chunk_index: int, lines: List[str]):
        """
        Write one chunk to destination/result-part-NNN.csv

        Args:
            destination: Output directory, created if absent
            chunk_index: 1-based chunk index used in the file name
            lines: Serialized lines; blank lines are dropped
        """
        output_dir = os.fspath(destination)
        os.makedirs(output_dir, exist_ok=True)

        output_file = os.path.join(output_dir, output_file_name(chunk_index))
        with open(output_file, 'w', encoding=self.encoding) as f:
            for line in drop_blank_lines(lines):
                f.write(f"{line}\n")

        logger.debug(f"Wrote chunk {chunk_index} to {output_file}")


class InMemoryDataManager(DataManager):
    """
    Storage-free data manager for running the engine in isolation.

    Args:
        serialize_fn: (key, values) -> lines
        files: Mapping of source path -> {file id -> list of records}
    """

    def __init__(self, serialize_fn: SerializeFunc,
                 files: Optional[Mapping[Any, Mapping[Any, List[Record]]]] = None):
        super().__init__(serialize_fn)
        self.files = {source: dict(batches) for source, batches in (files or {}).items()}
        self.outputs: Dict[Any, Dict[int, List[str]]] = {}
        self._lock = threading.Lock()

    def add_file(self, source_path, file_id, records: List[Record]):
        self.files.setdefault(source_path, {})[file_id] = list(records)

    def list_files(self, source_path) -> List[Any]:
        if source_path not in self.files:
            raise FileNotFoundError(f"Source not found: {source_path}")
        return list(self.files[source_path])

    def read_records(self, file_id) -> List[Dict[str, str]]:
        for batches in self.files.values():
            if file_id in batches:
                return [dict(record) for record in batches[file_id]]
        raise FileNotFoundError(f"File not found: {file_id}")

    def write(self, destination, chunk_index: int, lines: List[str]):
        with self._lock:
            self.outputs.setdefault(destination, {})[chunk_index] = drop_blank_lines(lines)

    def output_files(self, destination) -> Dict[str, List[str]]:
        """Written chunks of a destination keyed by their output file name"""
        with self._lock:
            chunks = self.outputs.get(destination, {})
            return {output_file_name(index): list(lines) for index, lines in sorted(chunks.items())}
