import pathlib

import pytest

from invdist.util.warning import diagnostic_sink


@pytest.fixture
def LOG_PATH(tmp_path) -> pathlib.Path:
    """path for a scitrack log file"""
    return tmp_path / "invdist.log"


@pytest.fixture
def collected():
    """routes diagnostics into a list of (label, message, category)"""
    records = []

    def sink(label, message, category=None):
        records.append((label, message, category))

    with diagnostic_sink(sink):
        yield records
