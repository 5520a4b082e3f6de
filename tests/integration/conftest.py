"""Skip integration tests unless ``--integration`` is given.

Tests also marked ``ci_safe`` stub the token endpoint and always run.
"""

import pytest


def pytest_collection_modifyitems(config, items):
    if config.getoption("--integration", default=False):
        return
    skip_integration = pytest.mark.skip(reason="Need --integration option to run")
    for item in items:
        if "integration" in item.keywords and "ci_safe" not in item.keywords:
            item.add_marker(skip_integration)
