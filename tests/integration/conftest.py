"""Shared fixtures for integration tests.

These tests wire real components (config loading, HTTP client factory,
handler registry) together with mocked HTTP via respx.
"""

from __future__ import annotations

import pytest
import respx


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
