"""Builders for anchored UI subtrees.

Every function creates new nodes, parents them under ``parent`` (when given)
and returns the subtree root. No state is kept between calls.
"""
from __future__ import annotations

from .models import Node, PersistentCall, RectLayout

UI_LAYER = 5
BUTTON_SIZE = [160.0, 30.0]
BLACK = [0.0, 0.0, 0.0, 1.0]
WHITE = [1.0, 1.0, 1.0, 1.0]
BAR_BACKGROUND = [1.0, 1.0, 1.0, 100 / 255]
BAR_FILL = [1.0, 0.0, 0.0, 1.0]


def _attach(parent: Node | None, node: Node) -> Node:
    if parent is not None:
        parent.add_child(node)
    return node


def create_canvas(name: str = "Canvas") -> Node:
    """Screen-space overlay canvas root."""
    canvas = Node(name=name, layer=UI_LAYER, rect=RectLayout.stretch())
    canvas.add_component("Canvas", render_mode="ScreenSpaceOverlay")
    canvas.add_component("CanvasScaler", ui_scale_mode="ConstantPixelSize")
    canvas.add_component("GraphicRaycaster")
    return canvas


def create_event_system(name: str = "EventSystem") -> Node:
    event_system = Node(name=name)
    event_system.add_component("EventSystem")
    event_system.add_component("StandaloneInputModule")
    return event_system


def create_panel(parent: Node | None, name: str, layout: RectLayout | None = None) -> Node:
    panel = Node(name=name, layer=UI_LAYER, rect=layout or RectLayout.stretch())
    return _attach(parent, panel)


def create_button(
    parent: Node | None,
    name: str,
    label: str,
    position: list[float],
    *,
    size: list[float] | None = None,
    on_click: PersistentCall | None = None,
) -> Node:
    """Clickable image with a centered text label child."""
    button = Node(
        name=name,
        layer=UI_LAYER,
        rect=RectLayout(anchored_position=list(position), size=list(size or BUTTON_SIZE)),
    )
    button.add_component("Image", color=list(WHITE))
    button.add_component(
        "Button",
        target_graphic=button.ref("Image"),
        on_click=[on_click] if on_click is not None else [],
        interactable=True,
    )
    text = Node(name="Text", layer=UI_LAYER, rect=RectLayout.stretch())
    text.add_component("TextMeshProUGUI", text=label, color=list(BLACK), alignment="Center")
    button.add_child(text)
    return _attach(parent, button)


def create_value_bar(
    parent: Node | None,
    name: str,
    layout: RectLayout,
    *,
    value: float = 1.0,
    fill_color: list[float] | None = None,
) -> Node:
    """Background plus fill region; the fill fraction is the slider value (0..1)."""
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"Value bar fraction must be within 0..1, got {value}")

    bar = Node(name=name, layer=UI_LAYER, rect=layout)

    background = Node(name="Background", layer=UI_LAYER, rect=RectLayout.stretch())
    background.add_component("Image", color=list(BAR_BACKGROUND))
    bar.add_child(background)

    fill_area = Node(name="Fill Area", layer=UI_LAYER, rect=RectLayout.stretch())
    bar.add_child(fill_area)

    fill = Node(name="Fill", layer=UI_LAYER, rect=RectLayout(size=[0.0, 0.0]))
    fill.add_component("Image", color=list(fill_color or BAR_FILL))
    fill_area.add_child(fill)

    bar.add_component(
        "Slider",
        fill_rect=fill.ref(),
        target_graphic=fill.ref("Image"),
        min_value=0.0,
        max_value=1.0,
        value=value,
        interactable=False,
    )
    return _attach(parent, bar)


def create_text_label(
    parent: Node | None,
    name: str,
    text: str,
    layout: RectLayout,
    *,
    font_size: float = 14.0,
    color: list[float] | None = None,
) -> Node:
    label = Node(name=name, layer=UI_LAYER, rect=layout)
    label.add_component("TextMeshProUGUI", text=text, font_size=font_size, color=list(color or WHITE))
    return _attach(parent, label)
