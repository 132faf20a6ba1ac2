from __future__ import annotations

import pytest

from ._fakes import FakeChannel


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()
