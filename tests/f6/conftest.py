"""Fixtures for F6 tests - CLI."""

import pytest


@pytest.fixture
def data_env(tmp_path) -> dict[str, str]:
    """Environment pointing the CLI at an empty data directory."""
    return {"LINGUETA_DATA_DIR": str(tmp_path)}
