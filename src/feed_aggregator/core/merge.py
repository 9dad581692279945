"""
Merge & persistence step shared by the single-channel and aggregate paths.
"""

from collections.abc import Iterable

from feed_aggregator.core.identity import difference, union
from feed_aggregator.core.interfaces import EntryStore
from feed_aggregator.logger import get_logger
from feed_aggregator.models import FeedEntry

logger = get_logger(__name__)


def merge_entries(
    store: EntryStore,
    baseline: Iterable[FeedEntry],
    candidates: Iterable[FeedEntry],
) -> list[FeedEntry]:
    """Persist the candidates not already in the baseline and merge them in.

    The delta (candidates whose link is absent from the baseline) is saved
    with a single ``save_all`` call and flagged ``fresh``. Baseline entries
    keep ``fresh=False``.

    Args:
        store: Entry store receiving the delta
        baseline: Previously persisted entries
        candidates: Newly retrieved entries

    Returns:
        Baseline followed by the delta, unique by link
    """
    baseline = list(baseline)
    delta = difference(candidates, baseline)

    if delta:
        store.save_all(delta)

    for entry in delta:
        entry.fresh = True

    logger.info(f"Merged {len(delta)} new entries into {len(baseline)} stored entries")
    return union(baseline, delta)
