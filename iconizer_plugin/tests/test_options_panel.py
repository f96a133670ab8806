import pytest

from iconizer_plugin.configuration import IconizerConfiguration, IconizerMode
from iconizer_plugin.layout_rules import LayoutRow
from iconizer_plugin.options_controller import AlreadyInitializedError
from iconizer_plugin.options_page import IconizerOptionsPage
from iconizer_plugin.tab_colors import TabColor


@pytest.fixture()
def tk_root():
    try:
        import tkinter as tk
    except Exception as exc:  # pragma: no cover - environment guard
        pytest.skip(f"tkinter unavailable: {exc}")
    try:
        root = tk.Tk()
    except tk.TclError as exc:  # pragma: no cover - headless guard
        pytest.skip(f"Tk root unavailable: {exc}")
    root.withdraw()
    yield root
    try:
        root.destroy()
    except Exception:
        pass


def _build(tk_root, configuration):
    from iconizer_plugin.options_panel import create_options_panel

    page = IconizerOptionsPage(configuration)
    panel, controller = create_options_panel(tk_root, page, configuration)
    panel.frame.pack()
    tk_root.update_idletasks()
    return page, panel, controller


def test_default_mode_shows_only_mode_row(tk_root):
    page, panel, _controller = _build(tk_root, IconizerConfiguration())
    assert panel.visible_rows() == [LayoutRow.MODE]
    assert page.apply_count == 0


def test_loaded_configuration_populates_form(tk_root):
    configuration = IconizerConfiguration(
        mode=IconizerMode.ICON_AND_TEXT,
        horizontal_spacing=6.5,
        use_tab_colors=True,
        tab_colors={"Output": TabColor(255, 0, 0)},
    )
    page, panel, controller = _build(tk_root, configuration)

    assert page.apply_count == 0
    assert panel.read_fields().horizontal_spacing == 6.5
    assert panel.grid.row_count == 1
    assert LayoutRow.TAB_COLORS_EDITOR in panel.visible_rows()
    assert LayoutRow.ICON_TEXT_SPACING in panel.visible_rows()
    assert controller.build_configuration() == configuration


def test_mode_change_reaches_page_and_relayouts(tk_root):
    page, panel, _controller = _build(tk_root, IconizerConfiguration(mode=IconizerMode.ICON_AND_TEXT))

    panel._var_mode.set(IconizerMode.TEXT_ONLY.display_text)

    assert page.configuration.mode is IconizerMode.TEXT_ONLY
    visible = panel.visible_rows()
    assert LayoutRow.ROTATE_ICONS not in visible
    assert LayoutRow.ICON_TEXT_SPACING not in visible
    assert LayoutRow.HORIZONTAL_MARGIN in visible


def test_unparseable_spacing_keeps_last_value(tk_root):
    page, panel, _controller = _build(tk_root, IconizerConfiguration(mode=IconizerMode.ICON_ONLY))

    panel._var_horizontal.set("2,5")
    assert page.configuration.horizontal_spacing == 2.5
    panel._var_horizontal.set("abc")
    assert page.configuration.horizontal_spacing == 2.5


def test_grid_edits_flow_to_page(tk_root):
    page, panel, controller = _build(
        tk_root,
        IconizerConfiguration(mode=IconizerMode.ICON_ONLY, use_tab_colors=True),
    )

    panel.grid._add_btn.invoke()
    assert panel.grid.row_count == 1
    assert page.apply_count == 0

    controller.edit_tab_text(0, "Output")
    controller.edit_color_text(0, "#FF00FF00")
    assert dict(page.configuration.tab_colors) == {"Output": TabColor(0, 255, 0)}

    panel.grid._rows[0].remove.invoke()
    assert panel.grid.row_count == 0
    assert len(page.configuration.tab_colors) == 0


def test_host_failure_shows_status(tk_root):
    class _Rejecting:
        def apply(self, configuration):
            raise ValueError("locked")

    from iconizer_plugin.options_panel import create_options_panel

    panel, _controller = create_options_panel(tk_root, _Rejecting(), IconizerConfiguration(mode=IconizerMode.ICON_ONLY))
    panel._var_rotate.set(False)
    assert panel._status_var.get() == "Failed to apply options: locked"


def test_controller_cannot_be_initialized_twice(tk_root):
    page, _panel, controller = _build(tk_root, IconizerConfiguration())
    with pytest.raises(AlreadyInitializedError):
        controller.initialize(page, IconizerConfiguration())
