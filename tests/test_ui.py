"""Tests for the UI subtree builders."""
import pytest

from template_generator.models import Node, ObjectRef, PersistentCall, RectLayout
from template_generator.ui import (
    UI_LAYER,
    create_button,
    create_canvas,
    create_panel,
    create_text_label,
    create_value_bar,
)


def test_canvas_is_screen_overlay():
    canvas = create_canvas()

    assert canvas.require_component("Canvas").fields["render_mode"] == "ScreenSpaceOverlay"
    assert canvas.get_component("GraphicRaycaster") is not None
    assert canvas.layer == UI_LAYER


def test_button_has_label_and_click_handler():
    panel = create_panel(None, "Panel")
    call = PersistentCall(target=ObjectRef(file_id="abc", component="GameManager"), method="StartGame")

    button = create_button(panel, "StartButton", "Start Game", [0.0, 20.0], on_click=call)

    assert panel.children == [button]
    assert button.rect.anchored_position == [0.0, 20.0]
    assert button.find("Text").require_component("TextMeshProUGUI").fields["text"] == "Start Game"
    assert button.require_component("Button").fields["on_click"] == [call]


def test_repeated_calls_build_independent_subtrees():
    first = create_button(None, "A", "A", [0.0, 0.0])
    second = create_button(None, "A", "A", [0.0, 0.0])

    first_ids = {node.file_id for node in first.walk()}
    second_ids = {node.file_id for node in second.walk()}
    assert first_ids.isdisjoint(second_ids)


def test_value_bar_structure():
    layout = RectLayout(size=[200.0, 20.0])
    bar = create_value_bar(None, "HealthBar", layout, value=0.5)

    assert [child.name for child in bar.children] == ["Background", "Fill Area"]
    fill = bar.find("Fill")
    slider = bar.require_component("Slider")
    assert slider.fields["fill_rect"] == fill.ref()
    assert slider.fields["value"] == 0.5
    assert slider.fields["interactable"] is False


@pytest.mark.parametrize("value", [-0.1, 1.5])
def test_value_bar_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        create_value_bar(None, "Bar", RectLayout(), value=value)


def test_text_label_attaches_to_parent():
    parent = Node(name="HUD")
    label = create_text_label(parent, "Coords", "X: 0 | Z: 0", RectLayout(), font_size=18.0)

    assert parent.find("Coords") is label
    assert label.require_component("TextMeshProUGUI").fields["font_size"] == 18.0
