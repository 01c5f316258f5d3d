import logging
import pytest

from viewloader.core.templating import helpers
from viewloader.logging_setup import LOGGER_NAME


@pytest.fixture(autouse=True)
def restore_helper_hooks():
    """configure_helpers() mutates module state; put it back after every test."""
    saved = dict(helpers._hooks)
    yield
    helpers._hooks.clear()
    helpers._hooks.update(saved)


@pytest.fixture(autouse=True)
def detach_log_handlers():
    # CLI runs attach handlers bound to CliRunner streams that close afterwards.
    yield
    logging.getLogger(LOGGER_NAME).handlers.clear()
