"""
Shuffle/sort stage.
Groups the merged map output by key, then orders the groups by key.
Both input and output are fully materialized.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional

from chunkmr.errors import ShuffleError
from chunkmr.models import Entry, Group

logger = logging.getLogger(__name__)


def group_entries(entries: Iterable[Entry]) -> Dict[Any, List[Any]]:
    """
    Group entry values by key equality

    Args:
        entries: (key, value) pairs from the map phase

    Returns:
        Dictionary mapping each distinct key to all of its values
    """
    key_groups = defaultdict(list)
    try:
        for key, value in entries:
            key_groups[key].append(value)
    except TypeError as e:
        raise ShuffleError(f"Cannot group entries: {e}") from e
    return dict(key_groups)


def sort_groups(key_groups: Dict[Any, List[Any]],
                sort_key: Optional[Callable[[Any], Any]] = None,
                value_key: Optional[Callable[[Any], Any]] = None) -> List[Group]:
    """
    Order grouped values by key

    Args:
        key_groups: Output of group_entries
        sort_key: Maps a key to its sort position; natural ordering if None
        value_key: When set, values inside each group are sorted with it

    Returns:
        Groups sorted by key
    """
    key_fn = sort_key if sort_key is not None else (lambda key: key)
    try:
        ordered = sorted(key_groups.items(), key=lambda item: key_fn(item[0]))
        if value_key is not None:
            return [Group(key, sorted(values, key=value_key)) for key, values in ordered]
    except Exception as e:
        raise ShuffleError(f"Cannot sort groups: {e}") from e
    return [Group(key, values) for key, values in ordered]


def shuffle_and_sort(entries: Iterable[Entry],
                     sort_key: Optional[Callable[[Any], Any]] = None,
                     value_key: Optional[Callable[[Any], Any]] = None) -> List[Group]:
    """Group entries by key and return the groups in key order"""
    key_groups = group_entries(entries)
    groups = sort_groups(key_groups, sort_key=sort_key, value_key=value_key)
    logger.info(f"Shuffle produced {len(groups)} groups")
    return groups
