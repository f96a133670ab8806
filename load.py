"""Entry point for the Tab Iconizer plugin."""
from __future__ import annotations

import importlib
import logging
from typing import Any, Optional

if __package__:
    from .version import __version__ as TAB_ICONIZER_VERSION, DEV_MODE_ENV_VAR, is_dev_build
    from .iconizer_plugin.configuration import IconizerConfiguration
    from .iconizer_plugin.options_controller import OptionsController
    from .iconizer_plugin.options_page import ConfigurationListener, IconizerOptionsPage
    from .iconizer_plugin.options_panel import OptionsPanel, create_options_panel
else:  # pragma: no cover - host loads as top-level module
    from version import __version__ as TAB_ICONIZER_VERSION, DEV_MODE_ENV_VAR, is_dev_build
    from iconizer_plugin.configuration import IconizerConfiguration
    from iconizer_plugin.options_controller import OptionsController
    from iconizer_plugin.options_page import ConfigurationListener, IconizerOptionsPage
    from iconizer_plugin.options_panel import OptionsPanel, create_options_panel

PLUGIN_NAME = "TabIconizer"
PLUGIN_VERSION = TAB_ICONIZER_VERSION
DEV_BUILD = is_dev_build(TAB_ICONIZER_VERSION)
LOGGER_NAME = PLUGIN_NAME
LOG_TAG = PLUGIN_NAME

HOST_DEFAULT_LOG_LEVEL = logging.DEBUG if DEV_BUILD else logging.INFO
_LEVEL_NAME_MAP = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": logging.DEBUG,
}


def _load_host_config_module() -> Optional[Any]:
    try:
        return importlib.import_module("config")
    except Exception:
        return None


def _resolve_host_logger() -> Optional[logging.Logger]:
    module = _load_host_config_module()
    if module is None:
        return None
    logger_obj = getattr(module, "logger", None)
    return logger_obj if isinstance(logger_obj, logging.Logger) else None


def _coerce_level(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        token = raw.strip().upper()
        if token.isdigit():
            return int(token)
        return _LEVEL_NAME_MAP.get(token)
    return None


def _resolve_host_log_level() -> int:
    candidates: list[Optional[int]] = []
    module = _load_host_config_module()
    if module is not None:
        config_obj = getattr(module, "config", None)
        if config_obj is not None:
            getter = getattr(config_obj, "get", None)
            if callable(getter):
                try:
                    candidates.append(_coerce_level(getter("loglevel")))
                except Exception:
                    LOGGER_FALLBACK.debug("Host config lookup for loglevel failed", exc_info=True)
        host_logger = _resolve_host_logger()
        if host_logger is not None:
            candidates.append(host_logger.getEffectiveLevel())
    candidates.append(logging.getLogger().getEffectiveLevel())
    candidates.append(HOST_DEFAULT_LOG_LEVEL)
    for level in candidates:
        if isinstance(level, int) and level != logging.NOTSET:
            return level
    return HOST_DEFAULT_LOG_LEVEL


def _effective_log_level(level: Optional[int] = None) -> int:
    if level is None:
        level = _resolve_host_log_level()
    if DEV_BUILD and level > logging.DEBUG:
        return logging.DEBUG
    return level


class _HostLogHandler(logging.Handler):
    """Forward plugin records to the host logger at the host's level."""

    def emit(self, record: logging.LogRecord) -> None:
        target_level = _effective_log_level()
        if record.levelno < target_level:
            return
        message = self.format(record)
        host_logger = _resolve_host_logger()
        if host_logger is not None and host_logger.isEnabledFor(record.levelno):
            host_logger.log(record.levelno, message)
            return
        root_logger = logging.getLogger()
        if root_logger.isEnabledFor(record.levelno):
            root_logger.log(record.levelno, message)


LOGGER_FALLBACK = logging.getLogger(f"{LOGGER_NAME}.Bootstrap")


def _configure_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_effective_log_level())
    if not any(getattr(handler, "_host_handler", False) for handler in logger.handlers):
        handler = _HostLogHandler()
        handler._host_handler = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(f"[%(asctime)s] [{LOG_TAG}] %(message)s", "%H:%M:%S"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


LOGGER = _configure_logger()
if DEV_BUILD:
    LOGGER.info(
        "Running Tab Iconizer dev build (%s); override via %s=0 to force release behaviour.",
        TAB_ICONIZER_VERSION,
        DEV_MODE_ENV_VAR,
    )

_page: Optional[IconizerOptionsPage] = None
_prefs_panel: Optional[OptionsPanel] = None
_prefs_controller: Optional[OptionsController] = None


def plugin_start3(plugin_dir: str) -> str:
    """Host entrypoint: create the options page holding the default configuration."""
    global _page
    LOGGER.info("Initialising Tab Iconizer %s from %s", PLUGIN_VERSION, plugin_dir)
    _page = IconizerOptionsPage()
    return PLUGIN_NAME


def plugin_stop() -> None:
    """Host entrypoint: drop the page and panel; safe to call twice."""
    global _page, _prefs_panel, _prefs_controller
    _prefs_controller = None
    _prefs_panel = None
    _page = None


def current_configuration() -> Optional[IconizerConfiguration]:
    return _page.configuration if _page is not None else None


def add_configuration_listener(listener: ConfigurationListener) -> bool:
    """Subscribe to applied configurations; returns False before plugin_start3."""
    if _page is None:
        return False
    _page.add_listener(listener)
    return True


def remove_configuration_listener(listener: ConfigurationListener) -> None:
    if _page is not None:
        _page.remove_listener(listener)


def plugin_prefs(parent, cmdr: str, is_beta: bool):  # pragma: no cover - host settings pane
    global _prefs_panel, _prefs_controller
    LOGGER.debug("plugin_prefs invoked: parent=%r cmdr=%r is_beta=%s", parent, cmdr, is_beta)
    if _page is None:
        LOGGER.debug("Options page not initialised; returning no UI")
        return None
    try:
        panel, controller = create_options_panel(parent, _page, _page.configuration)
    except Exception as exc:
        LOGGER.exception("Failed to build options panel: %s", exc)
        return None
    _prefs_panel = panel
    _prefs_controller = controller
    return panel.frame


def prefs_changed(cmdr: str, is_beta: bool) -> None:
    LOGGER.debug("prefs_changed invoked: cmdr=%r is_beta=%s", cmdr, is_beta)
    if _prefs_controller is None or _page is None:
        LOGGER.debug("No options panel to save")
        return
    _page.apply(_prefs_controller.build_configuration())
    configuration = _page.configuration
    LOGGER.debug(
        "Options saved: mode=%s h=%.1f v=%.1f icon_text=%.1f rotate=%s use_tab_colors=%s tab_colors=%d",
        configuration.mode.value,
        configuration.horizontal_spacing,
        configuration.vertical_spacing,
        configuration.icon_text_spacing,
        configuration.rotate_vertical_tab_icons,
        configuration.use_tab_colors,
        len(configuration.tab_colors),
    )


plugin_name = PLUGIN_NAME
