import logging

import pytest

from bnet.logging_config import configure_logging


@pytest.fixture
def bare_root_logger():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers = []
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_configure_logging_is_idempotent(bare_root_logger: logging.Logger) -> None:
    configure_logging(logging.DEBUG)
    assert len(bare_root_logger.handlers) == 1
    assert bare_root_logger.level == logging.DEBUG

    configure_logging(logging.WARNING)
    assert len(bare_root_logger.handlers) == 1
    assert bare_root_logger.level == logging.DEBUG
