"""Shared test fixtures for Toolwright."""

from __future__ import annotations

import pytest

from tests.fakes import add, explode, greet
from toolwright.toolkit import ToolRegistry


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry([add, greet, explode])
