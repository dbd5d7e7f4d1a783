"""Pytest configuration for integration tests."""

import pytest

from gymdesk.config import get_settings


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Run every flow against its own data directory."""
    directory = tmp_path / "gymdesk"
    monkeypatch.setenv("GYMDESK_DATA_DIR", str(directory))
    get_settings.cache_clear()
    yield directory
    get_settings.cache_clear()
