"""Persistence of saved analysis rollups."""

from .history import HistoryStore, RollupRecord

__all__ = ["HistoryStore", "RollupRecord"]
