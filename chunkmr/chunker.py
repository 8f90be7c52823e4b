"""
Splits sorted groups into fixed-capacity, order-preserving chunks.
"""

from typing import List, Sequence

from chunkmr.models import Chunk, Group


def chunk_groups(groups: Sequence[Group], chunk_size: int) -> List[Chunk]:
    """
    Partition groups into consecutive windows of at most chunk_size

    Args:
        groups: Groups already sorted by key
        chunk_size: Maximum number of groups per chunk

    Returns:
        Chunks numbered from 1; empty when there are no groups

    Raises:
        ValueError: If chunk_size is not a positive integer
    """
    validate_chunk_size(chunk_size)
    return [
        Chunk(index=position + 1, groups=list(groups[start:start + chunk_size]))
        for position, start in enumerate(range(0, len(groups), chunk_size))
    ]


def validate_chunk_size(chunk_size) -> int:
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    return chunk_size
