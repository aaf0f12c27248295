"""Shared test fixtures for autoc."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def example_text():
    with open(FIXTURES / "example.c", newline="") as f:
        return f.read()


@pytest.fixture
def example_file(tmp_path, example_text):
    target = tmp_path / "example.c"
    with open(target, "w", newline="") as f:
        f.write(example_text)
    return target
