import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SHARE_BASE_URL", "https://share.example.com")
    monkeypatch.setenv("JOBS_ENABLED", "false")

    from glucosmart.core.settings import get_settings
    get_settings.cache_clear()

    yield tmp_path

    get_settings.cache_clear()


@pytest.fixture
def client(data_dir):
    from fastapi.testclient import TestClient
    from glucosmart.main import app

    yield TestClient(app)

    app.dependency_overrides = {}
