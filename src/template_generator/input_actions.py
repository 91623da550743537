"""Input binding scheme for the player."""
from __future__ import annotations

import logging

from .models import InputAction, InputActionAsset, InputActionMap, InputBinding
from .store import AssetStore, asset_guid
from .workspace import Workspace

logger = logging.getLogger(__name__)

PLAYER_MAP = "Player"

# (composite part, keyboard control) for the WASD move composite
_MOVE_COMPOSITE_PARTS = (
    ("up", "<Keyboard>/w"),
    ("down", "<Keyboard>/s"),
    ("left", "<Keyboard>/a"),
    ("right", "<Keyboard>/d"),
)


def _player_map() -> InputActionMap:
    bindings = [
        InputBinding(action="Move", path="<Gamepad>/leftStick"),
        InputBinding(name="WASD", action="Move", path="2DVector(mode=2)", is_composite=True),
    ]
    bindings.extend(
        InputBinding(name=part, action="Move", path=control, is_part_of_composite=True)
        for part, control in _MOVE_COMPOSITE_PARTS
    )
    bindings.append(InputBinding(action="Look", path="<Mouse>/position"))
    bindings.append(InputBinding(action="Fire", path="<Mouse>/leftButton"))

    return InputActionMap(
        name=PLAYER_MAP,
        actions=[
            InputAction(name="Move", type="Value", expected_control_type="Vector2"),
            InputAction(name="Look", type="Value", expected_control_type="Vector2"),
            InputAction(name="Fire", type="Button"),
        ],
        bindings=bindings,
    )


def build_input_actions(store: AssetStore, workspace: Workspace) -> InputActionAsset:
    """Create and persist the binding asset at ``<Settings>/InputActions.inputactions``."""
    path = workspace.input_actions_path()
    asset = InputActionAsset(
        guid=asset_guid(path),
        name="InputActions",
        path=path,
        maps=[_player_map()],
    )
    store.save_asset(asset)
    logger.debug("Saved input actions to %s", path)
    return asset
