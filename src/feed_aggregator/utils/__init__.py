"""Utility helpers for the feed aggregator."""
