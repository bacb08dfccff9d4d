"""Shared pytest fixtures."""

import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_loguru():
    """Restore loguru's default stderr sink after tests that configure session logging."""
    yield
    logger.remove()
    logger.add(sys.stderr)
