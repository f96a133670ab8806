"""Host-side options page: owns the current configuration and fans out changes."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from .configuration import IconizerConfiguration

LOGGER = logging.getLogger("TabIconizer.Page")

ConfigurationListener = Callable[[IconizerConfiguration], None]


class IconizerOptionsPage:
    """Receives snapshots from the options controller and notifies listeners."""

    def __init__(self, configuration: Optional[IconizerConfiguration] = None) -> None:
        self._configuration = configuration or IconizerConfiguration()
        self._listeners: List[ConfigurationListener] = []
        self._apply_count = 0

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "IconizerOptionsPage":
        return cls(IconizerConfiguration.from_mapping(data))

    @property
    def configuration(self) -> IconizerConfiguration:
        return self._configuration

    @property
    def apply_count(self) -> int:
        return self._apply_count

    def add_listener(self, listener: ConfigurationListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ConfigurationListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def apply(self, configuration: IconizerConfiguration) -> None:
        if not isinstance(configuration, IconizerConfiguration):
            raise TypeError(f"expected IconizerConfiguration, got {configuration!r}")
        self._apply_count += 1
        if configuration == self._configuration:
            return
        previous = self._configuration
        self._configuration = configuration
        LOGGER.debug(
            "Options applied: mode=%s->%s use_tab_colors=%s tab_colors=%d",
            previous.mode.value,
            configuration.mode.value,
            configuration.use_tab_colors,
            len(configuration.tab_colors),
        )
        for listener in list(self._listeners):
            try:
                listener(configuration)
            except Exception:
                LOGGER.debug("Options listener %r failed", listener, exc_info=True)
