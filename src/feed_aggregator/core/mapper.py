"""
Mapping of raw feedparser entries to :class:`FeedEntry` objects.
"""

import re
from collections.abc import Iterable, Mapping
from html import unescape
from typing import Any, Optional

from bs4 import BeautifulSoup

from feed_aggregator.logger import get_logger
from feed_aggregator.models import FeedEntry
from feed_aggregator.utils.time_utils import struct_time_to_datetime

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "text/html"


class EntryMapper:
    """Converts feedparser entries into ``FeedEntry`` objects for one channel.

    * ``publication_date`` prefers the published date, then the updated date.
    * ``authors`` lists declared authors then contributors, duplicates kept.
    * ``contents`` holds the description first, then the content blocks in
      source order, each as ``{"type": ..., "value": ...}``.

    Entries without a link cannot be deduplicated and are skipped.
    """

    def map_entry(self, raw_entry: Mapping[str, Any], channel_id: int) -> Optional[FeedEntry]:
        """Map a single raw entry.

        Args:
            raw_entry: Raw entry from feedparser (or any mapping with the same keys)
            channel_id: Owning channel

        Returns:
            FeedEntry, or None if the entry has no link
        """
        link = self._normalize_link(raw_entry.get("link"))
        if link is None:
            logger.warning(f"Skipping entry without link from channel {channel_id}")
            return None

        return FeedEntry(
            link=link,
            channel_id=channel_id,
            title=self._normalize_title(raw_entry.get("title")),
            publication_date=self._publication_date(raw_entry),
            contents=self._contents(raw_entry),
            authors=self._authors(raw_entry),
        )

    def map_entries(self, raw_entries: Iterable[Mapping[str, Any]], channel_id: int) -> list[FeedEntry]:
        """Map raw entries, dropping those without a link."""
        entries = []
        for raw_entry in raw_entries:
            entry = self.map_entry(raw_entry, channel_id)
            if entry is not None:
                entries.append(entry)

        logger.debug(f"Mapped {len(entries)} entries for channel {channel_id}")
        return entries

    def _normalize_link(self, link: Optional[str]) -> Optional[str]:
        if not link:
            return None
        link = str(link).strip()
        return link or None

    def _normalize_title(self, title: Optional[str]) -> Optional[str]:
        if not title:
            return None

        title = unescape(str(title))
        if "<" in title:
            title = BeautifulSoup(title, "html.parser").get_text()

        title = re.sub(r"\s+", " ", title).strip()
        return title or None

    def _publication_date(self, raw_entry: Mapping[str, Any]):
        published = struct_time_to_datetime(raw_entry.get("published_parsed"))
        if published is not None:
            return published
        return struct_time_to_datetime(raw_entry.get("updated_parsed"))

    def _authors(self, raw_entry: Mapping[str, Any]) -> list[str]:
        authors = self._person_names(raw_entry.get("authors"))

        # RSS feeds may only carry a flat author string
        if not authors and raw_entry.get("author"):
            authors = [str(raw_entry["author"]).strip()]

        return authors + self._person_names(raw_entry.get("contributors"))

    def _person_names(self, people: Optional[Iterable[Any]]) -> list[str]:
        names = []
        for person in people or []:
            name = person.get("name") if isinstance(person, Mapping) else person
            if name:
                names.append(str(name).strip())
        return names

    def _contents(self, raw_entry: Mapping[str, Any]) -> list[dict]:
        blocks = [self._description(raw_entry)]
        blocks.extend(self._content_block(block) for block in raw_entry.get("content") or [])
        return [block for block in blocks if block is not None]

    def _description(self, raw_entry: Mapping[str, Any]) -> Optional[dict]:
        detail = raw_entry.get("summary_detail")
        if detail:
            return self._content_block(detail)

        summary = raw_entry.get("summary") or raw_entry.get("description")
        if summary:
            return {"type": DEFAULT_CONTENT_TYPE, "value": str(summary)}
        return None

    def _content_block(self, block: Any) -> Optional[dict]:
        if isinstance(block, Mapping):
            value = block.get("value")
            content_type = block.get("type") or DEFAULT_CONTENT_TYPE
        else:
            value, content_type = block, DEFAULT_CONTENT_TYPE

        if value is None:
            return None
        return {"type": content_type, "value": str(value)}
