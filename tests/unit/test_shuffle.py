"""
Unit tests for the shuffle/sort stage
"""

from collections import Counter

import pytest

from chunkmr.errors import ShuffleError, Stage
from chunkmr.shuffle import group_entries, shuffle_and_sort, sort_groups


class TestGrouping:
    """Tests for grouping entries by key"""

    def test_groups_values_by_key(self):
        """Test that values are correctly grouped by key"""
        entries = [('apple', 1), ('banana', 2), ('apple', 3), ('cherry', 4), ('apple', 5)]

        key_groups = group_entries(entries)

        assert Counter(key_groups['apple']) == Counter([1, 3, 5])
        assert key_groups['banana'] == [2]
        assert key_groups['cherry'] == [4]

    def test_empty_input(self):
        assert group_entries([]) == {}

    def test_unhashable_key_raises_shuffle_error(self):
        with pytest.raises(ShuffleError) as exc_info:
            group_entries([(['not', 'hashable'], 1)])
        assert exc_info.value.stage == Stage.SHUFFLE


class TestSorting:
    """Tests for ordering groups by key"""

    def test_natural_order(self):
        groups = sort_groups({'b': [1], 'c': [2], 'a': [3]})
        assert [group.key for group in groups] == ['a', 'b', 'c']

    def test_custom_sort_key(self):
        """A supplied key function defines the order"""
        groups = sort_groups({'b': [1], 'c': [2], 'a': [3]}, sort_key=lambda key: -ord(key))
        assert [group.key for group in groups] == ['c', 'b', 'a']

    def test_value_key_sorts_within_group(self):
        groups = sort_groups({'a': [3, 1, 2]}, value_key=lambda value: value)
        assert groups[0].values == [1, 2, 3]

    def test_incomparable_keys_raise_shuffle_error(self):
        with pytest.raises(ShuffleError):
            sort_groups({1: ['x'], 'a': ['y']})

    def test_failing_sort_key_raises_shuffle_error(self):
        def broken(key):
            raise RuntimeError("boom")

        with pytest.raises(ShuffleError, match="boom"):
            sort_groups({'a': [1], 'b': [2]}, sort_key=broken)


class TestShuffleAndSort:
    """Tests for the combined stage"""

    def test_keys_are_unique_and_sorted(self):
        entries = [(key, n) for n, key in enumerate(['d', 'a', 'c', 'a', 'b', 'd', 'a'])]

        groups = shuffle_and_sort(entries)
        keys = [group.key for group in groups]

        assert keys == sorted(set(keys))
        assert len(keys) == len(set(keys))

    def test_values_are_complete(self):
        """The multiset of values per key matches the input entries"""
        entries = [('x', 1), ('y', 2), ('x', 1), ('x', 3)]

        groups = {group.key: group.values for group in shuffle_and_sort(entries)}

        assert Counter(groups['x']) == Counter([1, 1, 3])
        assert Counter(groups['y']) == Counter([2])
