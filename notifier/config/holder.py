"""Atomically swapped configuration snapshot."""

import threading
from pathlib import Path
from typing import Callable, Optional

from notifier.logging import get_logger

from .exceptions import ConfigurationError
from .loader import load_app_config
from .models import AppConfig

logger = get_logger(__name__, component="config")


class ConfigHolder:
    """Holds the current AppConfig snapshot.

    Readers call get() once per unit of work and use that snapshot
    throughout; a reload replaces the reference in one assignment, so a
    reader never observes a partially updated configuration.
    """

    def __init__(
        self,
        config: AppConfig,
        loader: Optional[Callable[[], AppConfig]] = None,
    ):
        """
        Initialize the holder.

        Args:
            config: Initial configuration snapshot
            loader: Callable producing a fresh snapshot, used by reload()
        """
        self._config = config
        self._loader = loader
        self._reload_lock = threading.Lock()

    def get(self) -> AppConfig:
        """Return the current snapshot."""
        return self._config

    def swap(self, config: AppConfig) -> AppConfig:
        """Replace the current snapshot and return the previous one."""
        previous = self._config
        self._config = config
        return previous

    def reload(self) -> bool:
        """Load a new snapshot with the configured loader.

        A failed load keeps the current snapshot.

        Returns:
            True if a new snapshot was installed, False otherwise
        """
        if self._loader is None:
            return False

        with self._reload_lock:
            try:
                fresh = self._loader()
            except ConfigurationError as e:
                logger.error(
                    f"Configuration reload failed, keeping current configuration: {e.message}",
                    extra={"event": "config.reload.failed", "errors": e.errors},
                )
                return False

            previous = self.swap(fresh)

        logger.info(
            "Configuration reloaded",
            extra={
                "event": "config.reloaded",
                "mode": fresh.mode.value,
                "previous_mode": previous.mode.value,
                "template_count": len(fresh.templates),
            },
        )
        return True


def file_loader(
    config_path: Path,
    transform: Optional[Callable[[AppConfig], AppConfig]] = None,
) -> Callable[[], AppConfig]:
    """Build a loader that re-reads a config file, optionally transforming it."""

    def _load() -> AppConfig:
        config = load_app_config(config_path)
        return transform(config) if transform else config

    return _load
