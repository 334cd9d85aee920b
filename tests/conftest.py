"""Top-level pytest configuration.

``@pytest.mark.integration`` tests call the real Chrome Web Store and only
run with ``--integration``.  Adding ``@pytest.mark.ci_safe`` (every external
call stubbed) keeps an integration test in the default run.
"""

import pytest

_NEEDS_LIVE_STORE = pytest.mark.skip(reason="talks to the live store; pass --integration")


def pytest_addoption(parser):
    group = parser.getgroup("cws-publisher")
    group.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="also run tests that call the real Chrome Web Store",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: end-to-end test, live unless also marked ci_safe"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--integration"):
        return
    for item in items:
        if item.get_closest_marker("integration") and not item.get_closest_marker("ci_safe"):
            item.add_marker(_NEEDS_LIVE_STORE)
