"""Procedural demo catalog served when no playlist is available."""
from __future__ import annotations

import logging
import random
import time
from typing import Optional

from app.models.catalog import (
    AudioInfo,
    Catalog,
    Category,
    Channel,
    Episode,
    EpisodeInfo,
    MovieData,
    SeasonInfo,
    Series,
    SeriesDetails,
    SeriesInfo,
    Vod,
    VodDetails,
    VodInfo,
)

logger = logging.getLogger(__name__)

LIVE_CATEGORIES = [
    ("1", "Sports"),
    ("2", "Movies & Series"),
    ("3", "News"),
    ("4", "Kids"),
    ("5", "Documentaries"),
    ("6", "Entertainment"),
]

VOD_CATEGORIES = [
    ("101", "Action"),
    ("102", "Comedy"),
    ("103", "Drama"),
    ("104", "Horror"),
    ("105", "Science Fiction"),
    ("106", "Romance"),
]

SERIES_CATEGORIES = [
    ("201", "Drama"),
    ("202", "Comedy"),
    ("203", "Action"),
    ("204", "Thriller"),
    ("205", "Science Fiction"),
]

# (name, category_id, guide id)
CHANNELS = [
    ("ESPN", "1", "espn.us"),
    ("Fox Sports", "1", "foxsports.us"),
    ("Eurosport", "1", "eurosport.eu"),
    ("beIN Sports", "1", "beinsports.us"),
    ("HBO", "2", "hbo.us"),
    ("Cinemax", "2", "cinemax.us"),
    ("TNT", "2", "tnt.us"),
    ("Warner TV", "2", "warnertv.us"),
    ("BBC News", "3", "bbcnews.uk"),
    ("CNN International", "3", "cnn.us"),
    ("Bloomberg", "3", "bloomberg.us"),
    ("Euronews", "3", "euronews.eu"),
    ("Cartoon Network", "4", "cartoon.us"),
    ("Disney Channel", "4", "disney.us"),
    ("Nickelodeon", "4", "nick.us"),
    ("Boomerang", "4", "boomerang.us"),
    ("Discovery Channel", "5", "discovery.us"),
    ("National Geographic", "5", "natgeo.us"),
    ("History", "5", "history.us"),
    ("Animal Planet", "5", "animalplanet.us"),
    ("Comedy Central", "6", "comedycentral.us"),
    ("MTV", "6", "mtv.us"),
    ("E!", "6", "eonline.us"),
    ("AMC", "6", "amc.us"),
]

# (name, category_id, rating)
VODS = [
    ("Fast X", "101", 7.5),
    ("John Wick: Chapter 4", "101", 8.2),
    ("Mission: Impossible - Dead Reckoning", "101", 7.8),
    ("Operation Fortune", "101", 6.5),
    ("Barbie", "102", 7.0),
    ("The Super Mario Bros. Movie", "102", 7.2),
    ("Elemental", "102", 7.5),
    ("No Hard Feelings", "102", 6.8),
    ("Oppenheimer", "103", 8.9),
    ("Poor Things", "103", 8.1),
    ("Anatomy of a Fall", "103", 7.9),
    ("The Fabelmans", "103", 7.6),
    ("The Exorcist: Believer", "104", 5.5),
    ("The Nun II", "104", 5.8),
    ("The Black Phone", "104", 7.0),
    ("M3GAN", "104", 6.9),
    ("Dune: Part Two", "105", 8.8),
    ("Avatar: The Way of Water", "105", 7.6),
    ("Guardians of the Galaxy Vol. 3", "105", 8.0),
    ("The Flash", "105", 6.8),
    ("The Little Mermaid", "106", 7.2),
    ("Anyone But You", "106", 6.5),
    ("Persuasion", "106", 5.9),
    ("Don't Worry Darling", "106", 6.2),
]

# (name, category_id, rating, genre)
SERIES = [
    ("Breaking Bad", "201", 9.5, "Drama, Crime"),
    ("The Crown", "201", 8.6, "Drama, Biography"),
    ("Succession", "201", 8.9, "Drama"),
    ("House of the Dragon", "201", 8.4, "Drama, Fantasy"),
    ("The Office", "202", 9.0, "Comedy"),
    ("Brooklyn Nine-Nine", "202", 8.4, "Comedy"),
    ("Ted Lasso", "202", 8.8, "Comedy, Drama"),
    ("Only Murders in the Building", "202", 8.1, "Comedy, Mystery"),
    ("The Mandalorian", "203", 8.7, "Action, Adventure"),
    ("Jack Ryan", "203", 8.0, "Action, Drama"),
    ("Reacher", "203", 8.1, "Action, Crime"),
    ("The Last of Us", "203", 8.8, "Action, Drama"),
    ("True Detective", "204", 8.9, "Thriller, Crime"),
    ("Mindhunter", "204", 8.6, "Thriller, Crime"),
    ("Severance", "204", 8.7, "Thriller, Drama"),
    ("Dark", "204", 8.8, "Thriller, Science Fiction"),
    ("Stranger Things", "205", 8.7, "Science Fiction, Drama"),
    ("Black Mirror", "205", 8.8, "Science Fiction"),
    ("The Expanse", "205", 8.5, "Science Fiction"),
    ("Westworld", "205", 8.6, "Science Fiction"),
]

LIVE_ID_BASE = 1000
VOD_ID_BASE = 2000
SERIES_ID_BASE = 3000

TRAILER = "dQw4w9WgXcQ"
SURROUND = AudioInfo(codec_name="aac", channels=6, sample_rate="48000")


def _categories(rows: list[tuple[str, str]]) -> list[Category]:
    return [Category(category_id=cid, category_name=name) for cid, name in rows]


def _genre_for(category_id: str) -> str:
    for cid, name in VOD_CATEGORIES:
        if cid == category_id:
            return name
    return "General"


def _channels(base: str, added: str) -> list[Channel]:
    return [
        Channel(
            num=i + 1,
            name=name,
            stream_id=LIVE_ID_BASE + i,
            stream_icon=f"{base}/icons/channel_{LIVE_ID_BASE + i}.png",
            epg_channel_id=epg_id,
            added=added,
            category_id=cid,
            tv_archive=1,
            tv_archive_duration=7,
        )
        for i, (name, cid, epg_id) in enumerate(CHANNELS)
    ]


def _vods(base: str, added: str) -> tuple[list[Vod], dict[int, VodInfo]]:
    vods, infos = [], {}
    for i, (name, cid, rating) in enumerate(VODS):
        stream_id = VOD_ID_BASE + i
        vod = Vod(
            num=i + 1,
            name=name,
            stream_id=stream_id,
            stream_icon=f"{base}/posters/vod_{stream_id}.jpg",
            rating=f"{rating:.1f}",
            rating_5based=rating / 2,
            added=added,
            category_id=cid,
        )
        vods.append(vod)
        infos[stream_id] = VodInfo(
            info=VodDetails(
                movie_image=vod.stream_icon,
                tmdb_id=str(stream_id * 10),
                backdrop_path=[f"{base}/backdrops/vod_{stream_id}.jpg"],
                youtube_trailer=TRAILER,
                genre=_genre_for(cid),
                plot=f"A gripping story in {name}. It will hold you from start to finish.",
                cast="Lead Actor, Lead Actress, Famous Supporting Actor",
                rating=vod.rating,
                director="Famous Director",
                releasedate="2023-06-15",
                duration_secs=7200,
                duration="02:00:00",
                bitrate=5000,
                audio=SURROUND,
            ),
            movie_data=MovieData(
                stream_id=stream_id,
                name=name,
                added=added,
                category_id=cid,
                container_extension=vod.container_extension,
            ),
        )
    return vods, infos


def _series_info(item: Series, base: str, added: str, rng: random.Random) -> SeriesInfo:
    seasons: list[SeasonInfo] = []
    episodes: dict[str, list[Episode]] = {}
    for s in range(1, rng.randint(2, 5) + 1):
        count = rng.randint(8, 12)
        seasons.append(
            SeasonInfo(
                season_number=s,
                air_date=f"{2019 + s}-01-15",
                name=f"Season {s}",
                overview=f"Season {s} of {item.name}.",
                episode_count=count,
                cover=f"{base}/posters/series_{item.series_id}_s{s}.jpg",
                cover_big=f"{base}/posters/series_{item.series_id}_s{s}_big.jpg",
            )
        )
        episodes[str(s)] = [
            Episode(
                id=f"{item.series_id}{s:02d}{e:02d}",
                episode_num=e,
                title=f"Episode {e}",
                info=EpisodeInfo(
                    movie_image=f"{base}/episodes/series_{item.series_id}_s{s}e{e}.jpg",
                    plot=f"Episode {e} of season {s}: surprising events unfold.",
                    releasedate=f"{2019 + s}-{(e % 12) + 1:02d}-15",
                    rating=round(8.0 + rng.random(), 1),
                    duration_secs=2700,
                    duration="00:45:00",
                    bitrate=4500,
                    audio=SURROUND,
                ),
                added=added,
                season=s,
            )
            for e in range(1, count + 1)
        ]
    details = SeriesDetails(**item.model_dump(exclude={"num", "series_id", "youtube_trailer"}), youtube_trailer=TRAILER)
    return SeriesInfo(seasons=seasons, info=details, episodes=episodes)


def _series(base: str, added: str, rng: random.Random) -> tuple[list[Series], dict[int, SeriesInfo]]:
    items, infos = [], {}
    for i, (name, cid, rating, genre) in enumerate(SERIES):
        series_id = SERIES_ID_BASE + i
        item = Series(
            num=i + 1,
            name=name,
            series_id=series_id,
            cover=f"{base}/posters/series_{series_id}.jpg",
            plot=f"An incredible series about {name}.",
            cast="Ensemble cast",
            director="Talented Director",
            genre=genre,
            release_date="2020-01-01",
            last_modified=added,
            rating=f"{rating:.1f}",
            rating_5based=rating / 2,
            backdrop_path=[f"{base}/backdrops/series_{series_id}.jpg"],
            episode_run_time="45",
            category_id=cid,
        )
        items.append(item)
        infos[series_id] = _series_info(item, base, added, rng)
    return items, infos


def build_mock_catalog(
    asset_base: str = "",
    seed: Optional[int] = None,
    now: Optional[float] = None,
) -> Catalog:
    """Generate the demo catalog.

    Mock items carry no origin URL, so media requests for them answer 404.
    Season and episode counts are random; pass *seed* for a reproducible
    catalog.
    """
    rng = random.Random(seed)
    base = asset_base.rstrip("/")
    added = str(int(now if now is not None else time.time()))
    vods, vod_infos = _vods(base, added)
    series, series_infos = _series(base, added, rng)
    catalog = Catalog(
        source="mock",
        live_categories=_categories(LIVE_CATEGORIES),
        vod_categories=_categories(VOD_CATEGORIES),
        series_categories=_categories(SERIES_CATEGORIES),
        channels=_channels(base, added),
        vods=vods,
        series=series,
        vod_infos=vod_infos,
        series_infos=series_infos,
    )
    logger.info(f"Generated mock catalog: {catalog.stats()}")
    return catalog
