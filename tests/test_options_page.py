from __future__ import annotations

import pytest

from iconizer_plugin.configuration import IconizerConfiguration, IconizerMode
from iconizer_plugin.options_page import IconizerOptionsPage


def test_page_starts_with_defaults():
    page = IconizerOptionsPage()
    assert page.configuration == IconizerConfiguration()
    assert page.apply_count == 0


def test_page_from_mapping():
    page = IconizerOptionsPage.from_mapping({"mode": "text_only"})
    assert page.configuration.mode is IconizerMode.TEXT_ONLY


def test_apply_notifies_listeners_only_on_change():
    page = IconizerOptionsPage()
    received = []
    page.add_listener(received.append)
    page.add_listener(received.append)

    updated = IconizerConfiguration(mode=IconizerMode.ICON_ONLY)
    page.apply(updated)
    page.apply(IconizerConfiguration(mode=IconizerMode.ICON_ONLY))

    assert page.configuration == updated
    assert page.apply_count == 2
    assert received == [updated]


def test_failing_listener_does_not_block_others():
    page = IconizerOptionsPage()
    received = []

    def broken(_configuration):
        raise RuntimeError("listener failed")

    page.add_listener(broken)
    page.add_listener(received.append)
    page.apply(IconizerConfiguration(use_tab_colors=True))
    assert len(received) == 1


def test_remove_listener_is_idempotent():
    page = IconizerOptionsPage()
    received = []
    page.add_listener(received.append)
    page.remove_listener(received.append)
    page.remove_listener(received.append)
    page.apply(IconizerConfiguration(use_tab_colors=True))
    assert received == []


def test_apply_rejects_non_configuration():
    page = IconizerOptionsPage()
    with pytest.raises(TypeError):
        page.apply({"mode": "icon_only"})  # type: ignore[arg-type]
