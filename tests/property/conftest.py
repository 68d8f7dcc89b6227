"""Marks everything under tests/property/ as an invariant check."""

from pathlib import Path

import pytest

PROPERTY_DIR = Path(__file__).resolve().parent


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if PROPERTY_DIR in Path(str(item.fspath)).resolve().parents:
            item.add_marker(pytest.mark.invariants)
