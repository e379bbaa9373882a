"""Shared pytest fixtures for picosign tests."""

import pytest

from fakes import FakeBackend


@pytest.fixture
def fake_backend():
    """Deterministic backend with recorded hash preimages and no curve math."""
    return FakeBackend()
