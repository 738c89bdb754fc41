"""Shared fixtures for sparqlkit tests."""

from __future__ import annotations

import os

import pytest

from sparqlkit import config
from sparqlkit.results import ResultSet, parse_json

TEST_DATA_DIR = os.path.join(os.path.dirname(__file__), "test_data")
RESULTS_JSON = os.path.join(TEST_DATA_DIR, "results.json")


@pytest.fixture()
def results_bytes() -> bytes:
    """Raw SPARQL JSON results with two rows and nine variables."""
    with open(RESULTS_JSON, "rb") as f:
        return f.read()


@pytest.fixture()
def result_set(results_bytes) -> ResultSet:
    """The decoded sample result set."""
    return parse_json(results_bytes)


@pytest.fixture(autouse=True)
def restore_date_format():
    """Undo changes tests make to the process-wide date format."""
    saved = config.default_config.date_format
    yield
    config.default_config.date_format = saved
