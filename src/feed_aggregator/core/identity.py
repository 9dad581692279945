"""
Entry identity.

Two entries are the same item when their links are equal; the storage id,
channel and every other field are ignored. The link is modelled as an
explicit key so set operations never rely on structural equality.
"""

from collections.abc import Iterable
from typing import NewType

from feed_aggregator.models import FeedEntry

EntryKey = NewType("EntryKey", str)


def entry_key(entry: FeedEntry) -> EntryKey:
    return EntryKey(entry.link)


def index_entries(entries: Iterable[FeedEntry]) -> dict[EntryKey, FeedEntry]:
    """Map entries by key, keeping the first entry seen for each link."""
    indexed: dict[EntryKey, FeedEntry] = {}
    for entry in entries:
        indexed.setdefault(entry_key(entry), entry)
    return indexed


def unique_entries(entries: Iterable[FeedEntry]) -> list[FeedEntry]:
    """Collapse duplicates by link, preserving first-seen order."""
    return list(index_entries(entries).values())


def difference(candidates: Iterable[FeedEntry], baseline: Iterable[FeedEntry]) -> list[FeedEntry]:
    """Entries of ``candidates`` whose link is absent from ``baseline``.

    The result is itself unique by link.
    """
    known = index_entries(baseline)
    return [
        entry
        for key, entry in index_entries(candidates).items()
        if key not in known
    ]


def union(*groups: Iterable[FeedEntry]) -> list[FeedEntry]:
    """Concatenate groups and collapse duplicates; earlier groups win."""
    merged: dict[EntryKey, FeedEntry] = {}
    for group in groups:
        for entry in group:
            merged.setdefault(entry_key(entry), entry)
    return list(merged.values())
