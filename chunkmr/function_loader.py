#!/usr/bin/env python3
"""
Dynamic Function Loader for MapReduce jobs
Loads a job module defining its sources, reduce function and serializer
"""

import importlib.util
import os
import sys
from typing import List

from chunkmr.models import SourceDescriptor


class FunctionLoader:
    """Dynamically loads a job definition from a Python file"""

    def __init__(self, job_file: str):
        """
        Initialize the function loader

        Args:
            job_file: Path to a Python file defining SOURCES, reduce_function
                and serialize_function (and optionally sort_key)
        """
        self.job_file = job_file
        self.module = None

    def load_module(self):
        """
        Dynamically load the job module

        Returns:
            The loaded module object

        Raises:
            FileNotFoundError: If the job file doesn't exist
        """
        if not os.path.exists(self.job_file):
            raise FileNotFoundError(f"Job file not found: {self.job_file}")

        module_name = f"chunkmr_job_{os.path.splitext(os.path.basename(self.job_file))[0]}"
        spec = importlib.util.spec_from_file_location(module_name, self.job_file)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        self.module = module
        return module

    def _require(self, name: str):
        if not self.module:
            self.load_module()

        if not hasattr(self.module, name):
            raise AttributeError(f"Job module must define '{name}'")
        return getattr(self.module, name)

    def get_reduce_function(self):
        """
        Get reduce function from loaded module

        Raises:
            AttributeError: If module doesn't define 'reduce_function'
        """
        return self._require('reduce_function')

    def get_serialize_function(self):
        """
        Get serialize function from loaded module

        Raises:
            AttributeError: If module doesn't define 'serialize_function'
        """
        return self._require('serialize_function')

    def get_sort_key(self):
        """Key ordering function, or None for natural key order"""
        if not self.module:
            self.load_module()
        return getattr(self.module, 'sort_key', None)

    def get_sources(self, data_root: str) -> List[SourceDescriptor]:
        """
        Resolve the job's sources against a data directory

        Args:
            data_root: Directory holding one sub-directory per source name

        Returns:
            One SourceDescriptor per entry of the module's SOURCES mapping

        Raises:
            AttributeError: If module doesn't define 'SOURCES'
        """
        sources = self._require('SOURCES')
        return [
            SourceDescriptor(os.path.join(data_root, name), mapper)
            for name, mapper in sources.items()
        ]
