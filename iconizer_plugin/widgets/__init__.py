from .tab_color_grid import TabColorGridWidget, make_color_picker, swatch_style

__all__ = [
    "TabColorGridWidget",
    "make_color_picker",
    "swatch_style",
]
