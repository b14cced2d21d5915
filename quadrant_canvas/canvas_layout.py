"""Canvas layout primitives.

This module builds the notebook widget tree used by :class:`QuadrantCanvas`:
a title bar with the download button, the equation input with its Plot
button, the drawing surface, and a short footer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import ipywidgets as widgets
from IPython.display import display

__all__ = ["OneShotOutput", "CanvasLayout", "FOOTER_TEXT", "INPUT_PLACEHOLDER"]

FOOTER_TEXT = (
    "Supports graphing circular equations (e.g., x^2 + y^2 = r^2) "
    "and basic coordinate plotting."
)
INPUT_PLACEHOLDER = "Enter equation (e.g. x^2 + y^2 = 25)"

_PLOT_IDLE_COLOR = "#3B82F6"
_PLOT_BUSY_COLOR = "#ccc"
_NAV_COLOR = "#1E3A8A"


# SECTION: OneShotOutput [id: OneShotOutput]
# =============================================================================


class OneShotOutput(widgets.Output):
    """
    An Output widget that can only be displayed once.

    Widgets are live objects tied to the frontend by a comm channel; showing
    the same canvas twice leaves two views fighting over one state. Displaying
    a ``OneShotOutput`` a second time raises instead.

    Examples
    --------
    >>> out = OneShotOutput()  # doctest: +SKIP
    >>> display(out)  # ok  # doctest: +SKIP
    >>> display(out)  # raises RuntimeError  # doctest: +SKIP
    """

    __slots__ = ("_displayed",)

    def __init__(self) -> None:
        super().__init__()
        self._displayed = False

    def _repr_mimebundle_(
        self, include: Any = None, exclude: Any = None, **kwargs: Any
    ) -> Any:
        """IPython rich display hook; refuses a second display."""
        if self._displayed:
            raise RuntimeError(
                "OneShotOutput has already been displayed. "
                "This widget supports only one-time display."
            )
        self._displayed = True
        return super()._repr_mimebundle_(include=include, exclude=exclude, **kwargs)


# =============================================================================
# SECTION: CanvasLayout (The View) [id: CanvasLayout]
# =============================================================================


class CanvasLayout:
    """
    Manages the widget hierarchy around the drawing surface.

    Responsibilities:
    - Building the title bar, input row, canvas slot and footer.
    - Exposing the equation text, Plot and Download controls.
    - Reflecting the animation state on the Plot button.
    """

    def __init__(self, surface: widgets.Widget, *, equation: str = "", title: str = "Quadrant Canvas") -> None:
        """Build the widget tree around ``surface``.

        Parameters
        ----------
        surface : ipywidgets.Widget
            The drawing surface (normally a :class:`CanvasWidget`).
        equation : str, optional
            Initial equation text.
        title : str, optional
            Text shown in the title bar.
        """
        # 1. Title Bar
        self.title_html = widgets.HTML(
            value=f"<h1 style='margin:0;color:white'>{title}</h1>",
            layout=widgets.Layout(margin="0px"),
        )
        self.download_button = widgets.Button(
            description="Download Graph",
            tooltip="Save the current graph as graph.svg",
            layout=widgets.Layout(width="auto", padding="0 16px"),
        )
        self.download_button.style.button_color = "white"
        self._titlebar = widgets.HBox(
            [self.title_html, self.download_button],
            layout=widgets.Layout(
                width="100%",
                align_items="center",
                justify_content="space-between",
                padding="10px",
                margin="0 0 20px 0",
            ),
        )
        self._titlebar.add_class("quadrant-canvas-nav")
        self._nav_style = widgets.HTML(
            f"<style>.quadrant-canvas-nav {{ background-color: {_NAV_COLOR}; }}</style>"
        )

        # 2. Equation input row
        self.equation_text = widgets.Text(
            value=equation,
            placeholder=INPUT_PLACEHOLDER,
            continuous_update=True,
            layout=widgets.Layout(width="60%", margin="0 8px 0 0"),
        )
        self.plot_button = widgets.Button(
            description="Plot",
            layout=widgets.Layout(width="auto", padding="0 16px"),
        )
        self.plot_button.style.button_color = _PLOT_IDLE_COLOR
        self.input_row = widgets.HBox(
            [self.equation_text, self.plot_button],
            layout=widgets.Layout(
                max_width="800px",
                padding="20px",
                margin="0 auto 20px auto",
                border="1px solid #ddd",
                align_items="center",
            ),
        )

        # 3. Drawing surface
        self.surface = surface
        self.canvas_container = widgets.Box(
            [surface],
            layout=widgets.Layout(overflow="hidden", margin="0px", padding="0px"),
        )

        # 4. Footer
        self.footer = widgets.HTML(
            f"<p style='margin:0'>{FOOTER_TEXT}</p>",
            layout=widgets.Layout(padding="16px"),
        )

        # 5. Root Widget
        self.root_widget = widgets.VBox(
            [self._nav_style, self._titlebar, self.input_row, self.canvas_container, self.footer],
            layout=widgets.Layout(align_items="center", padding="16px"),
        )

    @property
    def output_widget(self) -> OneShotOutput:
        """Return a OneShotOutput wrapping the layout, ready for display."""
        out = OneShotOutput()
        with out:
            display(self.root_widget)
        return out

    def set_animating(self, animating: bool) -> None:
        """Disable the Plot button while an animation runs."""
        self.plot_button.disabled = bool(animating)
        self.plot_button.style.button_color = _PLOT_BUSY_COLOR if animating else _PLOT_IDLE_COLOR

    def observe_equation(self, callback: Callable[[str], None]) -> None:
        """Call ``callback(new_text)`` whenever the equation input changes."""

        def _on_change(change: dict) -> None:
            callback(change["new"])

        self.equation_text.observe(_on_change, names="value")

    def on_plot(self, callback: Callable[[], None]) -> None:
        self.plot_button.on_click(lambda _button: callback())

    def on_download(self, callback: Callable[[], None]) -> None:
        self.download_button.on_click(lambda _button: callback())
