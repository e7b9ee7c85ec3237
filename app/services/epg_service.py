"""EPG service — synthesized programme schedules and XMLTV export."""
from __future__ import annotations

import logging
import random
import re
import time
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Optional

from lxml import etree

from app.models.xtream import EpgEntry

if TYPE_CHECKING:
    from app.models.catalog import Catalog, Channel
    from app.services.config_service import ConfigService

logger = logging.getLogger(__name__)

GENERATOR_NAME = "M3U Xtream Panel"

PROGRAMS = [
    "Morning News",
    "Variety Hour",
    "Afternoon Movie",
    "News Update",
    "Talk Show",
    "Special Series",
    "Documentary",
    "Sports Roundup",
    "Magazine",
    "Prime Time Movie",
    "Late Show",
    "Rerun",
]

LOOKBACK = timedelta(hours=2)
MIN_SLOT_MINUTES = 30
MAX_SLOT_MINUTES = 120

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
XMLTV_FORMAT = "%Y%m%d%H%M%S +0000"

# Characters outside the XML 1.0 Char production
XML_INVALID_CHARS = re.compile("[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_text(value: Optional[str]) -> str:
    return XML_INVALID_CHARS.sub("", value or "")


class EpgService:
    """Builds a plausible rotating schedule for any live channel.

    *rng* and *clock* are injectable so schedules can be reproduced.
    """

    def __init__(
        self,
        config_service: "ConfigService",
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config_service = config_service
        self.rng = rng or random.Random()
        self.clock = clock or time.time

    @property
    def options(self):
        return self.config_service.settings.epg

    # ------------------------------------------------------------------
    # Schedule synthesis
    # ------------------------------------------------------------------

    def generate(self, channel: "Channel", hours: int) -> list[EpgEntry]:
        """Slots from two hours ago until *hours* from now."""
        now = datetime.fromtimestamp(int(self.clock()), tz=timezone.utc)
        current = now - LOOKBACK
        end = now + timedelta(hours=hours)
        guide_id = channel.epg_channel_id or str(channel.stream_id)
        lang = self.options.lang

        entries: list[EpgEntry] = []
        index = 0
        while current < end:
            slot_end = current + timedelta(minutes=self.rng.randint(MIN_SLOT_MINUTES, MAX_SLOT_MINUTES))
            title = PROGRAMS[index % len(PROGRAMS)]
            start_ts = int(current.timestamp())
            entries.append(
                EpgEntry(
                    id=f"{channel.stream_id}_{start_ts}",
                    epg_id=guide_id,
                    title=title,
                    lang=lang,
                    start=current.strftime(DISPLAY_FORMAT),
                    end=slot_end.strftime(DISPLAY_FORMAT),
                    description=f"{title} on {channel.name}.",
                    channel_id=guide_id,
                    start_timestamp=start_ts,
                    stop_timestamp=int(slot_end.timestamp()),
                    now_playing=1 if current <= now < slot_end else 0,
                    has_archive=channel.tv_archive,
                )
            )
            current = slot_end
            index += 1
        return entries

    def short_epg(self, catalog: "Catalog", stream_id: int, limit: Optional[int] = None) -> dict:
        channel = catalog.channel(stream_id)
        if channel is None:
            return {"epg_listings": []}
        if limit is None or limit < 1:
            limit = self.options.short_limit
        entries = self.generate(channel, self.options.short_hours)[:limit]
        return {"epg_listings": [e.model_dump() for e in entries]}

    def full_epg(self, catalog: "Catalog", stream_id: int) -> dict:
        channel = catalog.channel(stream_id)
        if channel is None:
            return {"epg_listings": []}
        entries = self.generate(channel, self.options.full_hours)
        return {"epg_listings": [e.model_dump() for e in entries]}

    # ------------------------------------------------------------------
    # XMLTV
    # ------------------------------------------------------------------

    def xmltv(self, catalog: "Catalog") -> bytes:
        """Render every live channel and its schedule as an XMLTV document."""
        root = etree.Element("tv", attrib={"generator-info-name": GENERATOR_NAME})
        lang = self.options.lang

        for channel in catalog.channels:
            ch_el = etree.SubElement(root, "channel", id=xml_text(channel.epg_channel_id or str(channel.stream_id)))
            etree.SubElement(ch_el, "display-name").text = xml_text(channel.name)
            if channel.stream_icon:
                etree.SubElement(ch_el, "icon", src=xml_text(channel.stream_icon))

        programmes = 0
        for channel in catalog.channels:
            for entry in self.generate(channel, self.options.xmltv_hours):
                start = datetime.fromtimestamp(entry.start_timestamp, tz=timezone.utc)
                stop = datetime.fromtimestamp(entry.stop_timestamp, tz=timezone.utc)
                prog = etree.SubElement(
                    root,
                    "programme",
                    start=start.strftime(XMLTV_FORMAT),
                    stop=stop.strftime(XMLTV_FORMAT),
                    channel=xml_text(entry.channel_id),
                )
                etree.SubElement(prog, "title", lang=lang).text = xml_text(entry.title)
                etree.SubElement(prog, "desc", lang=lang).text = xml_text(entry.description)
                programmes += 1

        logger.debug(f"XMLTV: {len(catalog.channels)} channels, {programmes} programmes")
        return etree.tostring(
            root,
            encoding="UTF-8",
            xml_declaration=True,
            doctype='<!DOCTYPE tv SYSTEM "xmltv.dtd">',
            pretty_print=True,
        )
