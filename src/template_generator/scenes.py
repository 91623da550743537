"""Scene assembly: the main menu and the gameplay scene.

Template instances are placed first and their cross-references patched
afterwards, always against the live instances of the scene being built.
Both scenes are checked for unresolved references before either is saved.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .compiler import ComponentTypeRegistry
from .errors import WiringError
from .layers import ensure_layer
from .models import (
    AssetDocument,
    Component,
    Node,
    ObjectRef,
    PersistentCall,
    PrefabAsset,
    RectLayout,
    SceneAsset,
    Transform,
    new_file_id,
)
from .store import AssetStore, asset_guid
from .templates import ENEMY, PLAYER, create_primitive
from .ui import (
    create_button,
    create_canvas,
    create_event_system,
    create_panel,
    create_text_label,
    create_value_bar,
)
from .workspace import Workspace

logger = logging.getLogger(__name__)

MAIN_MENU = "MainMenu"
GAMEPLAY = "Gameplay"
MANAGER_NAME = "_GameManager"
MAIN_CAMERA = "Main Camera"
GROUND_LAYER = "Ground"
GROUND_SCALE = [10.0, 1.0, 10.0]
PLAYER_SPAWN = [0.0, 0.0, 0.0]
ENEMY_SPAWN = [5.0, 0.0, 5.0]
CAMERA_FOLLOW_OFFSET = [0.0, 10.0, -5.0]
CAMERA_SMOOTH_SPEED = 0.125

HEALTH_BAR_LAYOUT = RectLayout(
    anchor_min=[0.5, 1.0],
    anchor_max=[0.5, 1.0],
    pivot=[0.5, 1.0],
    anchored_position=[0.0, -20.0],
    size=[200.0, 20.0],
)
COORDINATES_LAYOUT = RectLayout(
    anchor_min=[0.0, 0.0],
    anchor_max=[0.0, 0.0],
    pivot=[0.0, 0.0],
    anchored_position=[10.0, 10.0],
    size=[200.0, 30.0],
)


@dataclass
class GameContext:
    """The single manager object shared by every scene of one run.

    The manager lives in its home scene (the first scene it is placed in)
    and persists across scene loads; other scenes reach it, and it reaches
    them, through cross-scene references.
    """
    manager: Node
    home_scene: SceneAsset | None = None
    menu_panel: Node | None = None

    @classmethod
    def create(cls, types: ComponentTypeRegistry) -> "GameContext":
        manager = Node(name=MANAGER_NAME, persistent=True)
        manager.add_component(types.require("GameManager"))
        manager.add_component(
            types.require("UIManager"),
            mainMenuPanel=None,
            hudPanel=None,
            healthBar=None,
            coordinatesText=None,
        )
        return cls(manager=manager)

    @property
    def ui_manager(self) -> Component:
        return self.manager.require_component("UIManager")

    def place(self, scene: SceneAsset) -> bool:
        """Give the manager a home scene if it has none yet."""
        if self.home_scene is not None:
            return False
        scene.add_root(self.manager)
        self.home_scene = scene
        return True

    def manager_ref(self, component: str, from_scene: SceneAsset) -> ObjectRef:
        """Reference to a manager component, as seen from ``from_scene``."""
        if self.home_scene is None:
            raise WiringError("The game manager has not been placed in any scene")
        guid = None if from_scene is self.home_scene else self.home_scene.guid
        return self.manager.ref(component, guid=guid)

    def manager_call(self, method: str, from_scene: SceneAsset) -> PersistentCall:
        return PersistentCall(target=self.manager_ref("GameManager", from_scene), method=method)

    def ref_from_manager(self, scene: SceneAsset, node: Node, component: str | None = None) -> ObjectRef:
        """Reference to ``node`` of ``scene``, as stored on the manager."""
        guid = None if scene is self.home_scene else scene.guid
        return node.ref(component, guid=guid)


def _remap_value(value, remap: dict[str, str]):
    if isinstance(value, ObjectRef):
        if value.is_local and value.file_id in remap:
            return value.model_copy(update={"file_id": remap[value.file_id]})
        return value
    if isinstance(value, PersistentCall):
        return value.model_copy(update={"target": _remap_value(value.target, remap)})
    if isinstance(value, list):
        return [_remap_value(item, remap) for item in value]
    return value


def instantiate(template: PrefabAsset, position: list[float] | None = None) -> Node:
    """Deep copy of a template root with fresh node ids.

    References between nodes of the template are redirected to the copies;
    the persisted template itself is never touched.
    """
    instance = template.root.model_copy(deep=True)
    remap: dict[str, str] = {}
    for node in instance.walk():
        original = node.file_id
        node.file_id = new_file_id()
        remap[original] = node.file_id
    for node in instance.walk():
        for component in node.components:
            for key, value in component.fields.items():
                component.fields[key] = _remap_value(value, remap)
    instance.prefab = template.root_ref()
    if position is not None:
        instance.transform.position = list(position)
    return instance


def validate_references(
    document: AssetDocument,
    store: AssetStore,
    pending: Sequence[AssetDocument] = (),
) -> None:
    """Raise ``WiringError`` if any reference of ``document`` does not resolve.

    ``pending`` documents are about to be saved together with ``document``;
    references into them are checked against their nodes.
    """
    batch = {other.guid: other for other in pending}
    problems: list[str] = []
    for location, ref in document.iter_references():
        if ref.is_local or ref.guid == document.guid:
            target_doc = document
        elif ref.guid in batch:
            target_doc = batch[ref.guid]
        elif store.knows(ref.guid):
            continue
        else:
            problems.append(f"{location} -> unknown document {ref.guid}")
            continue
        if ref.file_id is None and target_doc is not document:
            continue
        target = next((n for n in target_doc.iter_nodes() if n.file_id == ref.file_id), None)
        if target is None:
            problems.append(f"{location} -> missing node {ref.file_id}")
        elif ref.component and target.get_component(ref.component) is None:
            problems.append(f"{location} -> {target.name} has no {ref.component}")
    if problems:
        raise WiringError(f"'{document.name}' has unresolved references: " + "; ".join(problems))


@dataclass
class SceneAssembler:
    store: AssetStore
    workspace: Workspace
    types: ComponentTypeRegistry
    context: GameContext
    degraded: list[str] = field(default_factory=list)

    def new_scene(self, name: str) -> SceneAsset:
        """Empty scene with the default camera and directional light."""
        path = self.workspace.scene_path(name)
        scene = SceneAsset(guid=asset_guid(path), name=name, path=path)

        camera = Node(name=MAIN_CAMERA, tag="MainCamera", transform=Transform(position=[0.0, 1.0, -10.0]))
        camera.add_component("Camera", field_of_view=60.0)
        camera.add_component("AudioListener")
        scene.add_root(camera)

        light = Node(
            name="Directional Light",
            transform=Transform(position=[0.0, 3.0, 0.0], rotation=[50.0, -30.0, 0.0]),
        )
        light.add_component("Light", type="Directional", intensity=1.0)
        scene.add_root(light)
        return scene

    def save(self, *scenes: SceneAsset) -> None:
        """Check every scene, then write them in order.

        Nothing is written unless all of them resolve. Scenes may reference
        each other.
        """
        for scene in scenes:
            validate_references(scene, self.store, [other for other in scenes if other is not scene])
        for scene in scenes:
            self.store.save_asset(scene)
            logger.debug("Saved scene %s", scene.path)

    def assemble(self, templates: dict[str, PrefabAsset]) -> tuple[SceneAsset, SceneAsset]:
        """Build MainMenu and Gameplay, then save both.

        The menu holds the game manager, whose HUD references are only final
        once Gameplay is built, so it is written last.
        """
        main_menu = self.build_main_menu()
        gameplay = self.build_gameplay(templates)
        self.save(gameplay, main_menu)
        return main_menu, gameplay

    def build_main_menu(self) -> SceneAsset:
        scene = self.new_scene(MAIN_MENU)
        scene.remove_root(MAIN_CAMERA)
        self.context.place(scene)

        canvas = scene.add_root(create_canvas())
        scene.add_root(create_event_system())

        panel = create_panel(canvas, "MainMenuPanel")
        self.context.menu_panel = panel
        self.context.ui_manager.fields["mainMenuPanel"] = self.context.ref_from_manager(scene, panel)

        create_button(
            panel, "StartButton", "Start Game", [0.0, 20.0],
            on_click=self.context.manager_call("StartGame", scene),
        )
        create_button(
            panel, "QuitButton", "Quit", [0.0, -20.0],
            on_click=self.context.manager_call("QuitGame", scene),
        )

        return scene

    def build_gameplay(self, templates: dict[str, PrefabAsset]) -> SceneAsset:
        for required in (PLAYER, ENEMY):
            if required not in templates:
                raise WiringError(f"Gameplay scene needs the '{required}' template")

        scene = self.new_scene(GAMEPLAY)

        layer = ensure_layer(self.store, GROUND_LAYER)
        if layer is None:
            self.degraded.append(
                f"Layer '{GROUND_LAYER}' could not be created; the ground uses the Default layer "
                "and ground raycasts will not hit it."
            )
        ground = create_primitive("Ground", "Plane", self.types)
        ground.transform.scale = list(GROUND_SCALE)
        ground.layer = layer if layer is not None else 0
        scene.add_root(ground)

        camera = scene.find(MAIN_CAMERA)
        if camera is None:
            raise WiringError(f"Scene '{scene.name}' has no '{MAIN_CAMERA}'")
        follow = camera.add_component(
            self.types.require("CameraFollow"),
            target=None,
            offset=list(CAMERA_FOLLOW_OFFSET),
            smoothSpeed=CAMERA_SMOOTH_SPEED,
        )

        player = scene.add_root(instantiate(templates[PLAYER], PLAYER_SPAWN))
        enemy = scene.add_root(instantiate(templates[ENEMY], ENEMY_SPAWN))

        follow.fields["target"] = player.ref()
        enemy.require_component("EnemyAI").fields["playerTarget"] = player.ref()

        self.context.place(scene)
        canvas = scene.add_root(create_canvas())
        scene.add_root(create_event_system())
        hud = create_panel(canvas, "HUDPanel")
        health_bar = create_value_bar(hud, "HealthBar", HEALTH_BAR_LAYOUT.model_copy(deep=True))
        coordinates = create_text_label(
            hud, "CoordinatesText", "X: 0 | Z: 0", COORDINATES_LAYOUT.model_copy(deep=True), font_size=14.0,
        )

        self.context.ui_manager.fields.update(
            hudPanel=self.context.ref_from_manager(scene, hud),
            healthBar=self.context.ref_from_manager(scene, health_bar, "Slider"),
            coordinatesText=self.context.ref_from_manager(scene, coordinates, "TextMeshProUGUI"),
        )

        home = self.context.home_scene
        if self.context.menu_panel is not None and home is not None and home is not scene:
            scene.deactivate_on_load.append(home.ref(self.context.menu_panel.file_id))

        return scene
