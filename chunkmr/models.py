"""
Shared data types for the MapReduce engine.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Mapping, Tuple

# A parsed input row: field name -> field value
Record = Mapping[str, str]

# A (key, value) pair emitted by a mapper
Entry = Tuple[Any, Any]

# Consumes every record of one file, returns zero or more entries
MapperFunc = Callable[[List[Record]], Iterable[Entry]]

# (key, values) -> reduced values
ReduceFunc = Callable[[Any, List[Any]], Iterable[Any]]

# (key, reduced values) -> output lines
SerializeFunc = Callable[[Any, List[Any]], Iterable[str]]


@dataclass
class SourceDescriptor:
    """A source path together with the mapper applied to each of its files"""
    path: Any
    mapper: MapperFunc


@dataclass
class Group:
    """All values mapped to one key, across every source and file"""
    key: Any
    values: List[Any] = field(default_factory=list)

    def __len__(self):
        return len(self.values)


@dataclass
class Chunk:
    """A contiguous, ordered slice of sorted groups with a 1-based index"""
    index: int
    groups: List[Group] = field(default_factory=list)

    def __len__(self):
        return len(self.groups)

    @property
    def keys(self) -> List[Any]:
        return [group.key for group in self.groups]


def as_source_descriptors(sources) -> List[SourceDescriptor]:
    """
    Normalize the sources argument of a run

    Args:
        sources: Mapping of source path to mapper, or an iterable of
            SourceDescriptor instances

    Returns:
        List of SourceDescriptor in iteration order
    """
    if isinstance(sources, Mapping):
        return [SourceDescriptor(path, mapper) for path, mapper in sources.items()]
    descriptors = list(sources)
    for descriptor in descriptors:
        if not isinstance(descriptor, SourceDescriptor):
            raise TypeError(f"Expected SourceDescriptor, got {type(descriptor).__name__}")
    return descriptors
