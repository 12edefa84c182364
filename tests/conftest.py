"""Shared fixtures for the powerpairs test suite."""

import logging

import pytest

from powerpairs.core.powers import PowerTable
from powerpairs.core.triplets import generate_power_triplets


@pytest.fixture
def powers():
    """Default table of powers, 2^0 .. 2^9."""
    return PowerTable.of_count(10)


@pytest.fixture
def triplet_pool(powers):
    """A small deterministic triplet pool."""
    return generate_power_triplets(6, powers)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() calls so every test starts with a bare logger."""
    yield
    logger = logging.getLogger("powerpairs")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
