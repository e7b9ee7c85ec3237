"""Tests for the M3U parser and its attribute tokenizer."""

import pytest

from app.models.m3u import StreamKind
from app.services.m3u_parser import (
    PlaylistFormatError,
    classify,
    parse_attributes,
    parse_duration,
    parse_playlist,
    parse_playlist_file,
)


# -------------------------------------------------------------------
# Attribute tokenizer
# -------------------------------------------------------------------

class TestParseAttributes:

    def test_basic_pairs(self):
        attrs = parse_attributes('-1 tvg-id="a.b" group-title="News",Name')
        assert attrs == {"tvg-id": "a.b", "group-title": "News"}

    def test_keys_are_case_insensitive(self):
        attrs = parse_attributes('TVG-ID="x" Group-Title="Y"')
        assert attrs == {"tvg-id": "x", "group-title": "Y"}

    def test_colon_prefixed_keys(self):
        attrs = parse_attributes(':http-user-agent="UA/1" :http-referrer="http://r/"')
        assert attrs[":http-user-agent"] == "UA/1"
        assert attrs[":http-referrer"] == "http://r/"

    def test_empty_value(self):
        assert parse_attributes('tvg-logo=""') == {"tvg-logo": ""}

    def test_value_may_contain_commas_and_spaces(self):
        attrs = parse_attributes('group-title="Movies, Action" tvg-name="A B"')
        assert attrs == {"group-title": "Movies, Action", "tvg-name": "A B"}

    def test_unquoted_value_is_ignored(self):
        assert parse_attributes("tvg-id=abc group-title=\"G\"") == {"group-title": "G"}

    def test_unterminated_value_stops_scan(self):
        assert parse_attributes('tvg-id="ok" tvg-name="broken') == {"tvg-id": "ok"}

    def test_space_before_equals_is_not_a_pair(self):
        assert parse_attributes('tvg-id ="x"') == {}


class TestParseDuration:

    @pytest.mark.parametrize("text,expected", [
        ("-1 tvg-id=\"x\",Name", -1),
        ("  120,Name", 120),
        ("+5,Name", 5),
        ("tvg-id=\"x\",Name", -1),
        ("", -1),
    ])
    def test_duration(self, text, expected):
        assert parse_duration(text) == expected


class TestClassify:

    @pytest.mark.parametrize("group,name,kind", [
        ("Movies", "Anything", StreamKind.MOVIE),
        ("VOD | Action", "X", StreamKind.MOVIE),
        ("Cinema", "X", StreamKind.MOVIE),
        ("Filmes", "X", StreamKind.MOVIE),
        ("Series", "X", StreamKind.SERIES),
        (None, "Show Season 2 Episode 4", StreamKind.SERIES),
        ("Séries", "X", StreamKind.SERIES),
        ("Temporada 1", "X", StreamKind.SERIES),
        ("News", "CNN", StreamKind.LIVE),
        (None, None, StreamKind.LIVE),
    ])
    def test_kind(self, group, name, kind):
        assert classify(group, name) is kind

    def test_movie_tokens_win_over_series_tokens(self):
        assert classify("Movie Series", "X") is StreamKind.MOVIE


# -------------------------------------------------------------------
# Playlist parsing
# -------------------------------------------------------------------

class TestParsePlaylist:

    def test_missing_header_raises(self):
        with pytest.raises(PlaylistFormatError):
            parse_playlist("#EXTINF:-1,Name\nhttp://x/1.ts\n")

    def test_empty_content_raises(self):
        with pytest.raises(PlaylistFormatError):
            parse_playlist("\n\n")

    def test_leading_blank_lines_and_bom_are_tolerated(self):
        playlist = parse_playlist("\ufeff\n\n#EXTM3U\n#EXTINF:-1,A\nhttp://x/a.ts\n")
        assert [e.name for e in playlist.entries] == ["A"]

    def test_header_attributes(self, sample_playlist):
        playlist = parse_playlist(sample_playlist)
        assert playlist.attributes == {
            "url-tvg": "http://epg.example.com/guide.xml",
            "x-tvg-url": "http://epg.example.com/alt.xml",
        }

    def test_entries_and_numbering(self, sample_playlist):
        playlist = parse_playlist(sample_playlist)
        names = [e.name for e in playlist.entries]
        assert names == ["News One", "Sport 24", "The Big Film", "Show S01E01", "Nameless", "Old Movie"]
        assert [e.stream_number for e in playlist.entries] == [1, 2, 3, 4, 5, 6]

    def test_stream_numbers_strictly_increasing(self, sample_playlist):
        numbers = [e.stream_number for e in parse_playlist(sample_playlist).entries]
        assert numbers == sorted(set(numbers))
        assert numbers[0] == 1

    def test_kinds(self, sample_playlist):
        kinds = [e.kind for e in parse_playlist(sample_playlist).entries]
        assert kinds == [
            StreamKind.LIVE, StreamKind.LIVE, StreamKind.MOVIE,
            StreamKind.SERIES, StreamKind.LIVE, StreamKind.MOVIE,
        ]

    def test_attributes_populated(self, sample_playlist):
        first = parse_playlist(sample_playlist).entries[0]
        assert first.tvg_id == "news.us"
        assert first.tvg_name == "News One"
        assert first.tvg_logo == "http://img.example.com/news.png"
        assert first.group_title == "News"
        assert first.url == "http://origin.example.com/live/news/index.m3u8"
        assert first.duration == -1

    def test_option_lines_and_blanks_skipped_before_url(self, sample_playlist):
        sport = parse_playlist(sample_playlist).entries[1]
        assert sport.url == "http://origin.example.com/live/sport.ts"

    def test_name_falls_back_to_tvg_name(self, sample_playlist):
        nameless = parse_playlist(sample_playlist).entries[4]
        assert nameless.name == "Nameless"
        assert nameless.group_title is None

    def test_per_entry_headers(self, sample_playlist):
        old = parse_playlist(sample_playlist).entries[5]
        assert old.http_user_agent == "Retro/1.0"
        assert old.http_referrer == "http://ref.example.com/"

    def test_entry_without_url_is_dropped(self, sample_playlist):
        names = [e.name for e in parse_playlist(sample_playlist).entries]
        assert "Dangling Entry" not in names

    def test_entry_followed_by_another_entry_is_dropped(self):
        content = "#EXTM3U\n#EXTINF:-1,First\n#EXTINF:-1,Second\nhttp://x/2.ts\n"
        entries = parse_playlist(content).entries
        assert [(e.name, e.stream_number) for e in entries] == [("Second", 1)]

    def test_name_after_last_comma(self):
        content = '#EXTM3U\n#EXTINF:-1 group-title="A, B",Real Name\nhttp://x/1.ts\n'
        entry = parse_playlist(content).entries[0]
        assert entry.name == "Real Name"
        assert entry.group_title == "A, B"

    def test_extgrp_supplies_missing_group(self):
        content = "#EXTM3U\n#EXTINF:-1,Chan\n#EXTGRP:Sports\nhttp://x/1.ts\n"
        assert parse_playlist(content).entries[0].group_title == "Sports"

    def test_crlf_line_endings(self):
        content = "#EXTM3U\r\n#EXTINF:-1,A\r\nhttp://x/a.ts\r\n"
        entry = parse_playlist(content).entries[0]
        assert entry.url == "http://x/a.ts"

    def test_categories_sorted_and_distinct(self, sample_playlist):
        playlist = parse_playlist(sample_playlist)
        assert playlist.categories == ["Cinema Classics", "Movies", "News", "Series", "Sports"]

    def test_parse_file(self, tmp_path, sample_playlist):
        path = tmp_path / "list.m3u"
        path.write_text(sample_playlist, encoding="utf-8")
        assert len(parse_playlist_file(str(path)).entries) == 6
