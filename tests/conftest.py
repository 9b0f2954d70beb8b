from __future__ import annotations

from typing import Iterator

import pytest

from protoclone.config import reset_config


@pytest.fixture(autouse=True)
def default_config() -> Iterator[None]:
    """Run every test against the default configuration."""
    reset_config()
    yield
    reset_config()
