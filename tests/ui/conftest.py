"""Shared fixtures for UI tests."""

import pytest


@pytest.fixture
def document_text():
    """Small document: two paragraphs, the first with three sentences."""
    return "One fish. Two fish. Red fish.\n\nBlue fish!"
