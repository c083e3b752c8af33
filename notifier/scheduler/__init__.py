"""Scheduling of periodic configuration reloads."""

from .service import ReloadScheduler

__all__ = [
    "ReloadScheduler",
]
