import os
import tempfile
from pathlib import Path

import pytest

_DB_PATH = Path(tempfile.gettempdir()) / f"socialfold-test-{os.getpid()}.db"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["RANKING_USE_REMOTE"] = "false"
os.environ.setdefault("OTEL_ENABLED", "false")

from fastapi.testclient import TestClient  # noqa: E402

from socialfold.main import app  # noqa: E402


@pytest.fixture
def client():
    # Fresh database per test; the lifespan recreates the tables
    _DB_PATH.unlink(missing_ok=True)
    with TestClient(app) as c:
        yield c
    _DB_PATH.unlink(missing_ok=True)
