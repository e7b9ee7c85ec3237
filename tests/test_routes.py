"""Integration tests — hit actual FastAPI routes via Starlette TestClient."""

import json

import pytest
from lxml import etree
from starlette.testclient import TestClient

from app.main import create_app
from app.models.xtream import PlayerAction
from app.routes.player_api import ACTION_HANDLERS
from app.services.m3u_parser import parse_playlist

CREDS = {"username": "demo", "password": "demo123"}
BASE = "http://panel.test:8080"


@pytest.fixture()
def client(data_dir):
    app = create_app(data_dir, epg_seed=7)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def mock_client(empty_data_dir):
    app = create_app(empty_data_dir, mock_seed=3, epg_seed=7)
    with TestClient(app) as c:
        yield c


def api(client, action=None, **params):
    query = {**CREDS, **params}
    if action is not None:
        query["action"] = action
    r = client.get("/player_api.php", params=query)
    assert r.status_code == 200
    return r.json()


# -------------------------------------------------------------------
# Health / Status
# -------------------------------------------------------------------

def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_status(client):
    data = client.get("/").json()
    assert data["status"] == "running"
    assert data["playlist_loaded"] is True
    assert data["catalog"]["channels"] == 3


def test_status_mock(mock_client):
    data = mock_client.get("/").json()
    assert data["playlist_loaded"] is False
    assert data["catalog"]["channels"] == 24


# -------------------------------------------------------------------
# player_api.php
# -------------------------------------------------------------------

def test_every_action_has_handler():
    assert set(ACTION_HANDLERS) == set(PlayerAction)


def test_login(client):
    data = api(client)
    assert data["user_info"]["auth"] == 1
    assert data["user_info"]["username"] == "demo"
    assert data["server_info"]["url"] == "panel.test"
    assert data["server_info"]["port"] == "8080"


@pytest.mark.parametrize("params", [
    {"username": "demo", "password": "nope"},
    {"username": "demo"},
    {},
])
def test_bad_credentials_are_in_band(client, params):
    for action in (None, "get_live_streams", "get_vod_info"):
        query = dict(params)
        if action:
            query["action"] = action
        r = client.get("/player_api.php", params=query)
        assert r.status_code == 200
        assert r.json()["user_info"]["auth"] == 0
        assert "server_info" not in r.json()


def test_categories(client):
    assert [c["category_name"] for c in api(client, "get_live_categories")] == ["News", "Sports", "Uncategorized"]
    assert [c["category_name"] for c in api(client, "get_vod_categories")] == ["Cinema Classics", "Movies"]
    assert [c["category_id"] for c in api(client, "get_series_categories")] == ["2000"]


def test_streams(client):
    live = api(client, "get_live_streams")
    assert [s["stream_id"] for s in live] == [1, 2, 5]
    assert live[0]["direct_source"] == f"{BASE}/demo/demo123/1.m3u8"
    assert [s["stream_id"] for s in api(client, "get_vod_streams")] == [3, 6]
    assert [s["series_id"] for s in api(client, "get_series")] == [4]


def test_streams_category_filter(client):
    assert [s["name"] for s in api(client, "get_live_streams", category_id="1")] == ["News One"]
    assert [s["name"] for s in api(client, "get_vod_streams", category_id="1001")] == ["Old Movie"]
    assert api(client, "get_series", category_id="999") == []


def test_action_is_case_insensitive(client):
    assert len(api(client, "GET_LIVE_STREAMS")) == 3


def test_vod_info(client):
    data = api(client, "get_vod_info", vod_id="6")
    assert data["movie_data"]["name"] == "Old Movie"
    assert data["movie_data"]["direct_source"] == f"{BASE}/movie/demo/demo123/6.mp4"


def test_series_info(client):
    data = api(client, "get_series_info", series_id="4")
    assert data["episodes"]["1"][0]["direct_source"] == f"{BASE}/series/demo/demo123/4.mp4"
    assert data["seasons"][0]["name"] == "Season 1"


@pytest.mark.parametrize("action,params,error", [
    ("get_vod_info", {}, "Invalid vod_id"),
    ("get_vod_info", {"vod_id": "abc"}, "Invalid vod_id"),
    ("get_vod_info", {"vod_id": "999"}, "VOD not found"),
    ("get_series_info", {}, "Invalid series_id"),
    ("get_series_info", {"series_id": "999"}, "Series not found"),
    ("get_short_epg", {}, "Invalid stream_id"),
    ("get_simple_data_table", {"stream_id": "x"}, "Invalid stream_id"),
    ("get_everything", {}, "Action not supported"),
])
def test_errors_are_in_band(client, action, params, error):
    assert api(client, action, **params) == {"error": error}


def test_short_epg(client):
    assert len(api(client, "get_short_epg", stream_id="1", limit="2")["epg_listings"]) == 2
    assert len(api(client, "get_short_epg", stream_id="1")["epg_listings"]) == 4
    assert api(client, "get_short_epg", stream_id="999") == {"epg_listings": []}


def test_simple_data_table(client):
    listings = api(client, "get_simple_data_table", stream_id="2")["epg_listings"]
    assert sum(e["now_playing"] for e in listings) == 1
    assert all(e["channel_id"] == "sport.us" for e in listings)


def test_mock_catalog_listings(mock_client):
    assert len(api(mock_client, "get_live_streams")) == 24
    assert len(api(mock_client, "get_vod_streams")) == 24
    series = api(mock_client, "get_series")
    assert len(series) == 20
    info = api(mock_client, "get_series_info", series_id=str(series[0]["series_id"]))
    assert 2 <= len(info["seasons"]) <= 5


# -------------------------------------------------------------------
# get.php
# -------------------------------------------------------------------

def test_playlist_requires_credentials(client):
    r = client.get("/get.php", params={"username": "demo", "password": "bad"})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_playlist(client):
    r = client.get("/get.php", params={**CREDS, "type": "m3u_plus", "output": "ts"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("audio/x-mpegurl")
    playlist = parse_playlist(r.text)
    assert [e.url for e in playlist.entries] == [
        f"{BASE}/demo/demo123/1.m3u8",
        f"{BASE}/demo/demo123/2.ts",
        f"{BASE}/movie/demo/demo123/3.mkv",
        f"{BASE}/series/demo/demo123/4.mp4",
        f"{BASE}/demo/demo123/5.ts",
        f"{BASE}/movie/demo/demo123/6.mp4",
    ]
    assert playlist.categories == ["Cinema Classics", "Movies", "News", "Series", "Sports", "Uncategorized"]


def test_playlist_uses_request_base_without_server_url(tmp_path, sample_playlist):
    (tmp_path / "playlist.m3u").write_text(sample_playlist, encoding="utf-8")
    with TestClient(create_app(str(tmp_path))) as c:
        text = c.get("/get.php", params=CREDS).text
    assert "http://testserver/demo/demo123/2.ts" in text


# -------------------------------------------------------------------
# xmltv.php
# -------------------------------------------------------------------

def test_xmltv_requires_credentials(client):
    assert client.get("/xmltv.php").status_code == 401


def test_xmltv(client):
    r = client.get("/xmltv.php", params=CREDS)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/xml")
    root = etree.fromstring(r.content)
    assert len(root.findall("channel")) == 3
    assert len(root.findall("programme")) > 3


def test_xmltv_with_control_characters_in_playlist(tmp_path):
    (tmp_path / "playlist.m3u").write_text(
        "#EXTM3U\n#EXTINF:-1 group-title=\"News\",Bad\x01Name\nhttp://origin.example.com/bad.ts\n", encoding="utf-8"
    )
    with TestClient(create_app(str(tmp_path))) as c:
        r = c.get("/xmltv.php", params=CREDS)
    assert r.status_code == 200
    assert etree.fromstring(r.content).find("channel/display-name").text == "BadName"


# -------------------------------------------------------------------
# Catalog API
# -------------------------------------------------------------------

def test_catalog_status(client):
    data = client.get("/api/catalog/status").json()
    assert data["mock"] is False
    assert data["vods"] == 2


def test_catalog_reload_picks_up_new_playlist(client, data_dir):
    with open(f"{data_dir}/playlist.m3u", "w", encoding="utf-8") as f:
        f.write("#EXTM3U\n#EXTINF:-1 group-title=\"Kids\",Cartoons\nhttp://origin.example.com/kids.ts\n")
    r = client.post("/api/catalog/reload")
    assert r.status_code == 200
    assert r.json()["status"] == "reloaded"
    assert [s["name"] for s in api(client, "get_live_streams")] == ["Cartoons"]


def test_catalog_reload_failure_keeps_snapshot(data_dir):
    config_path = f"{data_dir}/config.json"
    with open(config_path, encoding="utf-8") as f:
        config = json.load(f)
    config["mock_fallback"] = False
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config, f)

    with TestClient(create_app(data_dir)) as c:
        with open(f"{data_dir}/playlist.m3u", "w", encoding="utf-8") as f:
            f.write("not a playlist\n")
        r = c.post("/api/catalog/reload")
        assert r.status_code == 500
        assert r.json()["status"] == "error"
        assert len(api(c, "get_live_streams")) == 3
