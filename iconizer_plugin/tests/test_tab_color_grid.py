import pytest

from iconizer_plugin.tab_color_table import TabColorRow, TabColorTable
from iconizer_plugin.tab_colors import TabColor, from_qcolor, to_qcolor


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


@pytest.fixture()
def grid_widget(tk_root):
    from iconizer_plugin.widgets import TabColorGridWidget

    widget = TabColorGridWidget(tk_root)
    widget.pack()
    tk_root.update_idletasks()
    return widget


def _table(*rows):
    table = TabColorTable()
    for tab_text, color_text in rows:
        table.add_row(tab_text).color_text = color_text
    return table


def test_swatch_style_for_valid_and_invalid_rows():
    from iconizer_plugin.widgets import swatch_style

    valid = TabColorRow.create("Output", TabColor(0x12, 0x34, 0x56, 0x78))
    assert swatch_style(valid, "gray") == {
        "relief": "flat",
        "background": "#123456",
        "activebackground": "#123456",
    }
    invalid = TabColorRow("Output", "bogus")
    assert swatch_style(invalid, "gray")["relief"] == "raised"
    assert swatch_style(invalid, "gray")["background"] == "gray"


def test_render_builds_one_row_per_table_row(grid_widget):
    table = _table(("Output", "#FFFF0000"), ("", ""))
    grid_widget.render(table)
    assert grid_widget.row_count == 2
    first = grid_widget._rows[0]
    assert first.label_entry.get() == "Output"
    assert first.color_entry.get() == "#FFFF0000"
    assert str(first.swatch.cget("relief")) == "flat"
    assert str(grid_widget._rows[1].swatch.cget("relief")) == "raised"


def test_render_marks_undecodable_color_text(grid_widget):
    from iconizer_plugin.widgets.tab_color_grid import INVALID_ENTRY_BACKGROUND

    grid_widget.render(_table(("Output", "#zz")))
    assert str(grid_widget._rows[0].color_entry.cget("background")) == INVALID_ENTRY_BACKGROUND


def test_commit_forwards_entry_text(grid_widget):
    import tkinter as tk

    edits = []
    grid_widget.set_callbacks(
        on_tab_text=lambda index, text: edits.append(("tab", index, text)),
        on_color_text=lambda index, text: edits.append(("color", index, text)),
    )
    grid_widget.render(_table(("Output", "#FFFF0000")))
    row = grid_widget._rows[0]
    row.label_entry.delete(0, tk.END)
    row.label_entry.insert(0, "Errors")
    grid_widget._commit_tab_text(0, row.label_entry)
    row.color_entry.delete(0, tk.END)
    row.color_entry.insert(0, "blue")
    grid_widget._commit_color_text(0, row.color_entry)
    assert edits == [("tab", 0, "Errors"), ("color", 0, "blue")]


def test_stale_events_are_ignored(grid_widget):
    edits = []
    grid_widget.set_callbacks(on_tab_text=lambda index, text: edits.append(index))
    grid_widget.render(_table(("A", "#FF0000"), ("B", "#00FF00")))
    stale = grid_widget._rows[1].label_entry
    grid_widget.render(_table(("A", "#FF0000")))
    grid_widget._commit_tab_text(1, stale)
    grid_widget._commit_tab_text(0, stale)
    assert edits == []


def test_buttons_invoke_callbacks(grid_widget):
    calls = []
    grid_widget.set_callbacks(
        on_pick=lambda index: calls.append(("pick", index)),
        on_remove=lambda index: calls.append(("remove", index)),
        on_add=lambda: calls.append(("add",)),
    )
    grid_widget.render(_table(("A", "#FF0000")))
    grid_widget._rows[0].swatch.invoke()
    grid_widget._rows[0].remove.invoke()
    grid_widget._add_btn.invoke()
    assert calls == [("pick", 0), ("remove", 0), ("add",)]


def test_color_picker_keeps_alpha(tk_root, monkeypatch):
    import iconizer_plugin.widgets.tab_color_grid as tab_color_grid

    captured = {}

    def fake_askcolor(color=None, **_kwargs):
        captured["color"] = color
        return ((170, 187, 204), "#aabbcc")

    monkeypatch.setattr(tab_color_grid.colorchooser, "askcolor", fake_askcolor)

    picker = tab_color_grid.make_color_picker(tk_root)
    picked = picker(to_qcolor(TabColor(0x22, 0x33, 0x44, 0x11)))

    assert captured["color"] == "#223344"
    assert from_qcolor(picked) == TabColor(0xAA, 0xBB, 0xCC, 0x11)


def test_picked_color_for_added_row_is_opaque(monkeypatch):
    import iconizer_plugin.widgets.tab_color_grid as tab_color_grid
    from iconizer_plugin.configuration import IconizerConfiguration
    from iconizer_plugin.options_controller import OptionFields, OptionsController
    from iconizer_plugin.options_page import IconizerOptionsPage

    class _View:
        def set_change_callback(self, callback):
            pass

        def read_fields(self):
            return OptionFields()

        def write_fields(self, fields):
            pass

        def apply_layout(self, decision):
            pass

        def render_tab_colors(self, table):
            pass

        def show_status(self, message):
            pass

    monkeypatch.setattr(tab_color_grid.colorchooser, "askcolor", lambda *_args, **_kwargs: ((255, 0, 0), "#ff0000"))
    page = IconizerOptionsPage()
    controller = OptionsController(_View(), color_picker=tab_color_grid.make_color_picker(None))
    controller.initialize(page, IconizerConfiguration())
    index = controller.add_tab_color_row()
    controller.edit_tab_text(index, "Output")

    assert controller.pick_row_color(index) is True
    assert controller.tab_colors[index].color_text == "#FFFF0000"
    assert dict(page.configuration.tab_colors) == {"Output": TabColor(255, 0, 0, 255)}


def test_color_picker_cancel_returns_none(tk_root, monkeypatch):
    import iconizer_plugin.widgets.tab_color_grid as tab_color_grid

    monkeypatch.setattr(tab_color_grid.colorchooser, "askcolor", lambda *_args, **_kwargs: (None, None))

    picker = tab_color_grid.make_color_picker(tk_root)
    assert picker(to_qcolor(TabColor(1, 2, 3))) is None
