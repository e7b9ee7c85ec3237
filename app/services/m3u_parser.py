"""M3U parser — turns extended M3U text into ordered ``ParsedEntry`` records."""
from __future__ import annotations

import logging
from typing import Optional

from app.models.m3u import ParsedEntry, ParsedPlaylist, StreamKind

logger = logging.getLogger(__name__)

HEADER_MARKER = "#EXTM3U"
ENTRY_MARKER = "#EXTINF"
# Directive lines allowed between an #EXTINF line and its URL
OPTION_MARKERS = ("#EXTVLCOPT", "#EXTGRP")

MOVIE_TOKENS = ("movie", "filme", "vod", "cinema")
SERIES_TOKENS = ("series", "série", "serie", "episode", "temporada", "season")


class PlaylistFormatError(ValueError):
    """Raised when the text is not an extended M3U playlist."""


# ----------------------------------------------------------------------
# Attribute tokenizer
# ----------------------------------------------------------------------

def _is_key_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-:"


def parse_attributes(text: str) -> dict[str, str]:
    """Extract ``key="value"`` pairs from *text*.

    Keys are lower-cased; a key may contain word characters, ``-`` and
    ``:``.  A pair without a closing quote ends the scan; anything that
    does not look like a pair is skipped.
    """
    attrs: dict[str, str] = {}
    i, n = 0, len(text)
    while i < n:
        if not _is_key_char(text[i]):
            i += 1
            continue
        start = i
        while i < n and _is_key_char(text[i]):
            i += 1
        if not text.startswith('="', i):
            continue
        close = text.find('"', i + 2)
        if close == -1:
            break
        attrs[text[start:i].lower()] = text[i + 2:close]
        i = close + 1
    return attrs


def parse_duration(info: str) -> int:
    """Leading signed integer after ``#EXTINF:``; ``-1`` when absent."""
    i, n = 0, len(info)
    while i < n and info[i].isspace():
        i += 1
    start = i
    if i < n and info[i] in "+-":
        i += 1
    digits = i
    while i < n and info[i].isdigit():
        i += 1
    if i == digits:
        return -1
    return int(info[start:i])


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().strip('"').strip()
    return value or None


def _first(attrs: dict[str, str], *keys: str) -> Optional[str]:
    for key in keys:
        value = _clean(attrs.get(key))
        if value is not None:
            return value
    return None


def classify(group: Optional[str], name: Optional[str]) -> StreamKind:
    """Infer the stream kind from the group title and display name."""
    text = f"{group or ''} {name or ''}".lower()
    if any(token in text for token in MOVIE_TOKENS):
        return StreamKind.MOVIE
    if any(token in text for token in SERIES_TOKENS):
        return StreamKind.SERIES
    return StreamKind.LIVE


# ----------------------------------------------------------------------
# Parser
# ----------------------------------------------------------------------

def _parse_info_line(line: str) -> dict:
    body = line[len(ENTRY_MARKER):]
    if body.startswith(":"):
        body = body[1:]
    attrs = parse_attributes(body)
    comma = body.rfind(",")
    name = _clean(body[comma + 1:]) if comma != -1 else None
    tvg_name = _first(attrs, "tvg-name")
    return {
        "duration": parse_duration(body),
        "name": name or tvg_name or "",
        "tvg_id": _first(attrs, "tvg-id"),
        "tvg_name": tvg_name,
        "tvg_logo": _first(attrs, "tvg-logo"),
        "group_title": _first(attrs, "group-title"),
        "tvg_chno": _first(attrs, "tvg-chno"),
        "http_referrer": _first(attrs, ":http-referrer", "http-referrer"),
        "http_user_agent": _first(attrs, ":http-user-agent", "http-user-agent"),
    }


def parse_playlist(content: str) -> ParsedPlaylist:
    """Parse extended M3U *content*.

    Raises :class:`PlaylistFormatError` when the first non-blank line is not
    the ``#EXTM3U`` header.
    """
    lines = content.lstrip("\ufeff").splitlines()
    i, n = 0, len(lines)
    while i < n and not lines[i].strip():
        i += 1
    if i == n or not lines[i].strip().upper().startswith(HEADER_MARKER):
        raise PlaylistFormatError("Invalid M3U file: missing #EXTM3U header")

    header = lines[i].strip()
    attributes = parse_attributes(header[len(HEADER_MARKER):])
    i += 1

    entries: list[ParsedEntry] = []
    dropped = 0
    while i < n:
        line = lines[i].strip()
        if not line.upper().startswith(ENTRY_MARKER):
            i += 1
            continue

        info = _parse_info_line(line)
        url = None
        j = i + 1
        while j < n:
            candidate = lines[j].strip()
            if not candidate:
                j += 1
                continue
            if candidate.startswith("#"):
                upper = candidate.upper()
                if upper.startswith(OPTION_MARKERS):
                    if upper.startswith("#EXTGRP:") and not info["group_title"]:
                        info["group_title"] = _clean(candidate[len("#EXTGRP:"):])
                    j += 1
                    continue
                break
            url = candidate
            break

        if url is None:
            dropped += 1
            i = j
            continue

        entries.append(
            ParsedEntry(
                stream_number=len(entries) + 1,
                url=url,
                kind=classify(info["group_title"], info["name"]),
                **info,
            )
        )
        i = j + 1

    if dropped:
        logger.debug(f"Dropped {dropped} #EXTINF entries without a URL")
    return ParsedPlaylist(entries=entries, attributes=attributes)


def parse_playlist_file(path: str) -> ParsedPlaylist:
    with open(path, encoding="utf-8", errors="replace") as f:
        return parse_playlist(f.read())
