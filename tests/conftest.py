"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil
from concurrent.futures import ThreadPoolExecutor

from chunkmr.config import EngineConfig
from chunkmr.data_manager import InMemoryDataManager

EXAMPLES_DIR = os.path.join(os.path.dirname(__file__), '..', 'examples')


def key_total_serializer(key, values):
    """Serialize reduced dicts as 'key,field values...'"""
    return [",".join([str(key)] + [str(v) for v in value.values()]) for value in values]


def count_reducer(key, values):
    return [{'total': len(values)}]


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def pool():
    """Small thread pool for executor-level tests"""
    executor = ThreadPoolExecutor(max_workers=4)
    yield executor
    executor.shutdown(wait=True)


@pytest.fixture
def engine_config():
    """Engine config with small pools and metrics enabled"""
    return EngineConfig(map_workers=4, reduce_workers=4)


@pytest.fixture
def click_files():
    """Two sources, one file each, as used in the daily click count scenario"""
    return {
        'source_a': {
            'a.csv': [
                {'date': '2024-01-01'},
                {'date': '2024-01-01'},
                {'date': '2024-01-02'},
            ],
        },
        'source_b': {
            'b.csv': [
                {'date': '2024-01-01'},
            ],
        },
    }


@pytest.fixture
def click_manager(click_files):
    """In-memory data manager preloaded with click_files"""
    return InMemoryDataManager(key_total_serializer, click_files)


@pytest.fixture
def users_and_clicks():
    """Reference users and click facts sharing the user id"""
    return {
        'users': {
            'users.csv': [
                {'id': '1', 'name': 'Ona', 'country': 'LT'},
                {'id': '2', 'name': 'Jonas', 'country': 'LT'},
                {'id': '3', 'name': 'Anna', 'country': 'DE'},
            ],
        },
        'clicks': {
            'clicks-1.csv': [
                {'date': '2024-01-01', 'user_id': '1', 'click_target': '/home'},
                {'date': '2024-01-01', 'user_id': '3', 'click_target': '/home'},
            ],
            'clicks-2.csv': [
                {'date': '2024-01-02', 'user_id': '1', 'click_target': '/about'},
                {'date': '2024-01-02', 'user_id': '4', 'click_target': '/home'},
            ],
        },
    }


@pytest.fixture
def total_clicks_job_file():
    """Path to the total clicks example job file"""
    return os.path.join(EXAMPLES_DIR, 'total_clicks.py')


@pytest.fixture
def filtered_clicks_job_file():
    """Path to the filtered clicks example job file"""
    return os.path.join(EXAMPLES_DIR, 'filtered_clicks.py')


@pytest.fixture
def wordcount_job_file():
    """Path to word count example job file"""
    return os.path.join(EXAMPLES_DIR, 'wordcount.py')


@pytest.fixture
def inverted_index_job_file():
    """Path to inverted index example job file"""
    return os.path.join(EXAMPLES_DIR, 'inverted_index.py')


@pytest.fixture
def serializer():
    """(key, reduced dicts) -> 'key,value,...' lines"""
    return key_total_serializer


@pytest.fixture
def counter():
    """Reducer emitting the number of values of a group"""
    return count_reducer
