"""Submission notifier: turns submission lifecycle events into email notifications."""

__version__ = "0.1.0"
