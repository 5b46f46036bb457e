from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.steps.discover_people'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    os.environ.setdefault("RUN_ID", "test-run")


@pytest.fixture
def settings():
    from tests.fakes import make_settings

    return make_settings()


@pytest.fixture
def conn(tmp_path):
    from db.connection import open_store

    with open_store(f"sqlite:///{tmp_path / 'store.db'}") as db:
        yield db
