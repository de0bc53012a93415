import hashlib
import threading
from concurrent.futures import Future

import pytest

from delve.routes import level_api
from delve.routes.level_api import _coerce_seed, get_cached_level
from delve.mapgen import GenerationHandle, LayoutInvariantError, MapGenSettings


def test_map_returns_board_payload(client):
    r = client.get("/api/level/map?width=21&height=21&seed=1")
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 1
    assert data["width"] == 21 and data["height"] == 21
    assert data["render_width"] == 45 and data["render_height"] == 15
    assert len(data["rows"]) == 21
    assert data["doors"] == [[10, 10]]
    assert data["metrics"]["doors_placed"] == 1


def test_map_uses_configured_defaults(client):
    data = client.get("/api/level/map?seed=7").get_json()
    assert (data["width"], data["height"]) == (51, 41)


def test_ascii_is_plain_text(client):
    r = client.get("/api/level/ascii?width=21&height=21&seed=1")
    assert r.status_code == 200
    assert r.mimetype == "text/plain"
    lines = r.get_data(as_text=True).splitlines()
    assert len(lines) == 21
    assert lines[10][10] == "D"


def test_bad_dimensions_are_400(client):
    r = client.get("/api/level/map?width=50")
    assert r.status_code == 400
    assert "width" in r.get_json()["error"]
    r = client.get("/api/level/map?height=abc")
    assert r.status_code == 400


def test_pregenerate_accepts_and_later_map_joins(client):
    r = client.post("/api/level/pregenerate", json={"seed": 5, "width": 101, "height": 101})
    assert r.status_code == 202
    data = r.get_json()
    assert data["seed"] == 5 and data["width"] == 101
    assert isinstance(data["ready"], bool)
    assert len(level_api._level_cache) == 1
    m = client.get("/api/level/map?width=101&height=101&seed=5").get_json()
    assert len(m["rows"]) == 101
    assert len(level_api._level_cache) == 1


def test_pregenerate_without_body_picks_seed(client):
    r = client.post("/api/level/pregenerate")
    assert r.status_code == 202
    assert 0 <= r.get_json()["seed"] < 256


def test_coerce_seed_variants():
    assert _coerce_seed(300) == 44
    assert _coerce_seed("513") == 1
    assert _coerce_seed("alpha") == hashlib.sha256(b"alpha").digest()[0]
    assert _coerce_seed("alpha") == _coerce_seed(" alpha ")
    assert 0 <= _coerce_seed(None) < 256
    assert 0 <= _coerce_seed(True) < 256


def test_cache_reuses_handle(test_app):
    s = MapGenSettings(width=21, height=21, seed=1)
    assert get_cached_level(s) is get_cached_level(s)


def test_cache_disabled_builds_fresh(test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "MAPGEN_DISABLE_CACHE", True)
    s = MapGenSettings(width=21, height=21, seed=1)
    a, b = get_cached_level(s), get_cached_level(s)
    assert a is not b
    assert a.result(timeout=30) == b.result(timeout=30)
    assert level_api._level_cache == {}


def test_cache_evicts_oldest(test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "MAPGEN_CACHE_MAX", 2)
    for seed in (1, 2, 3):
        get_cached_level(MapGenSettings(width=21, height=21, seed=seed))
    assert list(level_api._level_cache) == [(2, 21, 21), (3, 21, 21)]


def test_evicted_level_runs_unthrottled(test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "MAPGEN_CACHE_MAX", 1)
    slow = get_cached_level(MapGenSettings(width=151, height=151, seed=1, step_delay=0.05), throttle=True)
    assert slow.throttled
    get_cached_level(MapGenSettings(width=21, height=21, seed=2))
    assert list(level_api._level_cache) == [(2, 21, 21)]
    assert not slow.throttled
    slow.result(timeout=30)


def test_failed_level_is_not_cached(client, monkeypatch):
    real = level_api.generate_from_settings
    calls = []

    def flaky(settings, *, throttle=False):
        calls.append(settings.seed)
        if len(calls) == 1:
            future = Future()
            future.set_exception(LayoutInvariantError("adjacent regions share no border"))
            return GenerationHandle(future, settings, threading.Event())
        return real(settings, throttle=throttle)

    monkeypatch.setattr(level_api, "generate_from_settings", flaky)
    with pytest.raises(LayoutInvariantError):
        client.get("/api/level/map?width=21&height=21&seed=1")
    assert level_api._level_cache == {}
    r = client.get("/api/level/map?width=21&height=21&seed=1")
    assert r.status_code == 200
    assert calls == [1, 1]
