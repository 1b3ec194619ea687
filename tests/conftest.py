"""Shared fixtures for timed-lyrics tests."""

import json
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def timed_response_bytes() -> bytes:
    """Raw catalog response body with word-timed lyrics."""
    return (FIXTURES_DIR / "lyrics_timed_response.json").read_bytes()


@pytest.fixture
def timed_response_ttml(timed_response_bytes) -> str:
    """The TTML document inside the catalog response fixture."""
    return json.loads(timed_response_bytes)["data"][0]["attributes"]["ttml"]
