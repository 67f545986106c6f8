"""
Shared pytest fixtures.
"""
import logging

import pytest

from winrepair.logger import LOGGER_NAME


@pytest.fixture(autouse=True)
def detach_session_logger():
    """Prevent session log handlers (and open files) leaking between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
