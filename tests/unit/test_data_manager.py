"""
Unit tests for the CSV and in-memory data managers
"""

import os

import pytest

from chunkmr.data_manager import CSVDataManager, InMemoryDataManager, output_file_name


def write_csv(path, text):
    with open(path, 'w', newline='') as f:
        f.write(text)


class TestOutputNaming:
    """Tests for the output file naming convention"""

    @pytest.mark.parametrize("index, expected", [
        (1, "result-part-001.csv"),
        (42, "result-part-042.csv"),
        (999, "result-part-999.csv"),
        (1000, "result-part-1000.csv"),
    ])
    def test_zero_padded_index(self, index, expected):
        assert output_file_name(index) == expected


class TestCSVDataManager:
    """Tests for CSV reading and writing"""

    def test_lists_only_regular_files_sorted(self, temp_dir):
        write_csv(os.path.join(temp_dir, 'b.csv'), 'x\n1\n')
        write_csv(os.path.join(temp_dir, 'a.csv'), 'x\n1\n')
        os.makedirs(os.path.join(temp_dir, 'nested'))

        files = CSVDataManager(lambda key, values: []).list_files(temp_dir)

        assert files == [os.path.join(temp_dir, 'a.csv'), os.path.join(temp_dir, 'b.csv')]

    def test_listing_missing_directory_raises(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            CSVDataManager(lambda key, values: []).list_files(os.path.join(temp_dir, 'missing'))

    def test_reads_records_with_header(self, temp_dir):
        path = os.path.join(temp_dir, 'clicks.csv')
        write_csv(path, 'date,user_id\n2024-01-01,1\n2024-01-02,"2"\n')

        records = CSVDataManager(lambda key, values: []).read_records(path)

        assert records == [
            {'date': '2024-01-01', 'user_id': '1'},
            {'date': '2024-01-02', 'user_id': '2'},
        ]

    def test_write_creates_destination_and_drops_blank_lines(self, temp_dir):
        destination = os.path.join(temp_dir, 'out', 'nested')

        CSVDataManager(lambda key, values: []).write(destination, 3, ['a,1', '', 'b,2'])

        with open(os.path.join(destination, 'result-part-003.csv')) as f:
            assert f.read() == 'a,1\nb,2\n'

    def test_serialize_uses_supplied_function(self):
        manager = CSVDataManager(lambda key, values: (f"{key},{v}" for v in values))
        assert manager.serialize('k', [1, 2]) == ['k,1', 'k,2']


class TestInMemoryDataManager:
    """Tests for the storage-free test double"""

    def test_lists_and_reads_files(self, click_manager):
        assert click_manager.list_files('source_a') == ['a.csv']
        assert len(click_manager.read_records('a.csv')) == 3

    def test_read_returns_copies(self, click_manager):
        """Callers cannot mutate the stored records"""
        records = click_manager.read_records('b.csv')
        records[0]['date'] = 'changed'

        assert click_manager.read_records('b.csv')[0]['date'] == '2024-01-01'

    def test_unknown_source_raises(self, click_manager):
        with pytest.raises(FileNotFoundError):
            click_manager.list_files('missing')

    def test_unknown_file_raises(self, click_manager):
        with pytest.raises(FileNotFoundError):
            click_manager.read_records('missing.csv')

    def test_output_files_use_naming_convention(self, serializer):
        manager = InMemoryDataManager(serializer)
        manager.write('out', 2, ['b', ''])
        manager.write('out', 1, ['a'])

        assert manager.output_files('out') == {
            'result-part-001.csv': ['a'],
            'result-part-002.csv': ['b'],
        }
