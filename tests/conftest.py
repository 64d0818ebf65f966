from __future__ import annotations

import pytest
from json_mock_designer.field_types import configure_faker


@pytest.fixture(autouse=True)
def seeded_faker():
    """Reproducible synthetic values for every test."""
    yield configure_faker('en_US', seed=1234)
