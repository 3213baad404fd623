"""Shared fixtures for the translation tests."""

import pytest

@pytest.fixture
def source_document():
    return {"title": "Hello"}
