import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import create_app  # noqa: E402
from delve.mapgen import MapGenSettings, TableRandom  # noqa: E402
from delve.routes.level_api import clear_level_cache  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app({"TESTING": True, "MAPGEN_WIDTH": 51, "MAPGEN_HEIGHT": 41})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def rng():
    """Private PRNG stream starting at table index 0."""
    return TableRandom(0)


@pytest.fixture()
def small_settings():
    return MapGenSettings(width=51, height=41, render_width=45, render_height=15, seed=3)


@pytest.fixture(autouse=True)
def _clear_level_cache():
    """Keep cached levels from leaking between tests."""
    clear_level_cache()
    yield
    clear_level_cache()


@pytest.fixture(autouse=True)
def _quiet_mapgen_logs(monkeypatch):
    monkeypatch.setenv("DELVE_LOG_LEVEL", "warn")
    yield
