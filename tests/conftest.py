"""Shared fixtures: a sample playlist and a wired app over a temp data dir."""

import json

import pytest

SAMPLE_PLAYLIST = """#EXTM3U url-tvg="http://epg.example.com/guide.xml" x-tvg-url="http://epg.example.com/alt.xml"
#EXTINF:-1 tvg-id="news.us" tvg-name="News One" tvg-logo="http://img.example.com/news.png" group-title="News",News One
http://origin.example.com/live/news/index.m3u8
#EXTINF:-1 tvg-id="sport.us" tvg-logo="http://img.example.com/sport.png" group-title="Sports",Sport 24
#EXTVLCOPT:http-user-agent=VLC/3.0

http://origin.example.com/live/sport.ts
#EXTINF:-1 group-title="Movies",The Big Film
http://origin.example.com/vod/big-film.mkv
#EXTINF:-1 group-title="Series",Show S01E01
http://origin.example.com/series/show-s01e01.mp4
#EXTINF:-1 tvg-name="Nameless",
http://origin.example.com/live/nameless.ts
#EXTINF:-1 group-title="Cinema Classics" http-user-agent="Retro/1.0" http-referrer="http://ref.example.com/",Old Movie
http://origin.example.com/vod/old-movie
#EXTINF:-1 group-title="News",Dangling Entry
"""

CREDS = {"username": "demo", "password": "demo123"}


@pytest.fixture()
def sample_playlist():
    return SAMPLE_PLAYLIST


@pytest.fixture()
def data_dir(tmp_path):
    """Temporary data directory holding the sample playlist and a config."""
    (tmp_path / "playlist.m3u").write_text(SAMPLE_PLAYLIST, encoding="utf-8")
    config = {
        "playlist_path": "playlist.m3u",
        "server_url": "http://panel.test:8080",
        "credentials": {"username": "demo", "password": "demo123"},
        "proxy": {"disconnect_poll_interval": 0.05, "chunk_size": 4},
    }
    (tmp_path / "config.json").write_text(json.dumps(config))
    return str(tmp_path)


@pytest.fixture()
def empty_data_dir(tmp_path):
    """Data directory without a playlist: the app falls back to mock data."""
    return str(tmp_path)
