"""
Pytest configuration file.
"""
from json import dump
from logging import INFO, basicConfig, getLogger
from pathlib import Path
from typing import Callable, List

import pytest

basicConfig(level=INFO)
logger = getLogger(__name__)

PatternFileFactory = Callable[[List[str]], str]


@pytest.fixture()
def pattern_file(tmp_path: Path) -> PatternFileFactory:
    def write_pattern_file(patterns: List[str]) -> str:
        path = tmp_path / f"patterns-{len(list(tmp_path.iterdir()))}.json"
        with path.open("w", encoding="utf-8") as file_pointer:
            dump(patterns, file_pointer)
        return str(path)

    return write_pattern_file
