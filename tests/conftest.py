import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drop handlers the CLI attaches to the root logger between tests."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
