"""
Pytest configuration for the DirectDigital client tests.

ARCHITECTURE NOTE:
- All pytest options are defined HERE in conftest.py (single source of truth)
- All fixtures are in fixtures.py (imported via "from fixtures import *")
- Test files only contain test functions and classes, no fixtures or options
"""

import pytest
from base.logger import Logger

# Import shared fixtures to make them available to all tests
from fixtures import *


# ==================== Pytest Configuration ====================

def pytest_addoption(parser):
    """
    Add custom command line options

    Note: All pytest options should be defined here, not in individual test files
    """
    parser.addoption(
        "--log-path", action="store", default=None,
        help="Log directory (file logging disabled when omitted)"
    )
    parser.addoption(
        "--file-log-level", action="store", default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level"
    )
    parser.addoption(
        "--console-log-level", action="store", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level"
    )


# ==================== Session-Scoped Fixtures ====================

@pytest.fixture(scope="session", autouse=True)
def setup_logger(request):
    """Initialize logger once per session"""
    Logger.reset()
    return Logger.get_instance(
        log_path=request.config.getoption("--log-path"),
        file_level=request.config.getoption("--file-log-level"),
        console_level=request.config.getoption("--console-log-level")
    )


@pytest.fixture(autouse=True)
def init_error_collection():
    """Reset collected error logs before each test"""
    Logger.init_error_collection()
    yield
