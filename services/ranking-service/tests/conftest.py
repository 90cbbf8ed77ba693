import os

import pytest

os.environ.setdefault("OTEL_ENABLED", "false")

from feedrank.schemas import Viewer  # noqa: E402
from ranking_fixtures import NOW, FixedRandom  # noqa: E402


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def viewer():
    return Viewer(user_id="me", following=["friend", "colleague"])


@pytest.fixture
def fixed_rng():
    return FixedRandom(0.5)
