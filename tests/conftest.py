"""Shared fixtures for aicov tests."""

import pytest

from aicov_cli.config import AnalyzerSettings

# Templated comments over stamped-out lookups.
GENERATED_SOURCE = """\
# Get the user by id
user = db.find(1)
# Get the order by id
order = db.find(2)
# Get the item by id
item = db.find(3)
"""

# Irregular, hand-written shape with no repeated templates.
HUMAN_SOURCE = """\
import os


def main(argv):
    if not argv:  # nothing to do
        return 1
    path = os.path.join(argv[0], "cfg")
    with open(path) as fh:
        data = fh.read().splitlines()
    return len(data)
"""


@pytest.fixture
def settings():
    return AnalyzerSettings()


@pytest.fixture
def generated_source():
    return GENERATED_SOURCE


@pytest.fixture
def human_source():
    return HUMAN_SOURCE
