"""Notification history queries."""

from __future__ import annotations

from tasknotify.history.query import HistoryPage, HistoryQuery, sort_newest_first

__all__ = ["HistoryPage", "HistoryQuery", "sort_newest_first"]
