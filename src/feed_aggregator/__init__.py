"""
Feed Aggregator - TTL-driven RSS/Atom channel aggregation.

This package refreshes subscribed channels when their freshness window has
expired, fans out retrieval of stale channels concurrently, and persists only
the entries that were not seen before.
"""

__version__ = "0.1.0"
