"""Notification dispatch and delivery tracking for the task manager."""

__version__ = "0.1.0"
