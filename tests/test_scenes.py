"""Tests for scene assembly and reference checking."""
import pytest

from template_generator.errors import StorageError, WiringError
from template_generator.input_actions import build_input_actions
from template_generator.layers import TAG_MANAGER_PATH
from template_generator.models import FIRST_USER_LAYER, LAYER_COUNT, Node, ObjectRef, SceneAsset, TagManager
from template_generator.scenes import (
    GAMEPLAY,
    MAIN_CAMERA,
    MAIN_MENU,
    MANAGER_NAME,
    GameContext,
    SceneAssembler,
    instantiate,
    validate_references,
)
from template_generator.store import AssetStore
from template_generator.templates import ENEMY, PLAYER, TemplateAssembler
from template_generator.workspace import Workspace

from .fakes import compiled_types


@pytest.fixture
def workspace(project_root):
    workspace = Workspace(project_root)
    workspace.ensure()
    return workspace


@pytest.fixture
def store(project_root):
    return AssetStore(project_root)


@pytest.fixture
def templates(store, workspace):
    input_actions = build_input_actions(store, workspace)
    return TemplateAssembler(store, workspace, compiled_types(), input_actions).assemble()


@pytest.fixture
def assembler(store, workspace):
    types = compiled_types()
    return SceneAssembler(store, workspace, types, GameContext.create(types))


def test_instantiate_copies_with_fresh_ids(templates):
    template = templates[PLAYER]
    template_ids = {node.file_id for node in template.root.walk()}

    instance = instantiate(template, [1.0, 0.0, 2.0])

    instance_ids = {node.file_id for node in instance.walk()}
    assert instance_ids.isdisjoint(template_ids)
    assert instance.prefab == template.root_ref()
    assert instance.transform.position == [1.0, 0.0, 2.0]
    assert template.root.transform.position == [0.0, 0.0, 0.0]


def test_instantiate_redirects_internal_references(templates):
    instance = instantiate(templates[PLAYER])

    fire_point = instance.find("FirePoint")
    controller = instance.require_component("PlayerController")
    assert controller.fields["firePoint"].file_id == fire_point.file_id
    # Links to other documents are kept as they are.
    assert controller.fields["projectilePrefab"] == templates[PLAYER].root.require_component(
        "PlayerController"
    ).fields["projectilePrefab"]


def test_main_menu_scene_is_built_before_any_save(assembler, store):
    scene = assembler.build_main_menu()

    assert scene.path == "Assets/TwinStickTemplate/Scenes/MainMenu.unity"
    assert scene.find(MAIN_CAMERA) is None
    manager = scene.find(MANAGER_NAME)
    assert manager.persistent
    start = scene.find("StartButton").require_component("Button").fields["on_click"][0]
    assert start.method == "StartGame"
    assert start.target == manager.ref("GameManager")
    assert not store.exists(scene.path)


def test_gameplay_scene_wires_live_instances(assembler, templates, store):
    _, scene = assembler.assemble(templates)

    player = next(node for node in scene.roots if node.name == PLAYER)
    enemy = next(node for node in scene.roots if node.name == ENEMY)
    assert player.file_id != templates[PLAYER].root.file_id
    assert enemy.require_component("EnemyAI").fields["playerTarget"] == player.ref()
    follow = scene.find(MAIN_CAMERA).require_component("CameraFollow")
    assert follow.fields["target"] == player.ref()
    assert scene.find("Ground").layer == FIRST_USER_LAYER
    assert scene.find(MANAGER_NAME) is None
    assert assembler.degraded == []

    saved = store.load_asset(scene.path, SceneAsset)
    assert saved.find(PLAYER).file_id == player.file_id


def test_manager_reaches_gameplay_hud_across_scenes(assembler, templates, store):
    main_menu, gameplay = assembler.assemble(templates)

    saved_menu = store.load_asset(main_menu.path, SceneAsset)
    ui_manager = saved_menu.find(MANAGER_NAME).require_component("UIManager")
    assert ui_manager.fields["hudPanel"] == gameplay.find("HUDPanel").ref(guid=gameplay.guid)
    assert ui_manager.fields["healthBar"].component == "Slider"
    assert ui_manager.fields["healthBar"].guid == gameplay.guid
    assert ui_manager.fields["mainMenuPanel"] == saved_menu.find("MainMenuPanel").ref()

    assert gameplay.deactivate_on_load == [main_menu.ref(saved_menu.find("MainMenuPanel").file_id)]


def test_gameplay_requires_templates(assembler):
    with pytest.raises(WiringError):
        assembler.build_gameplay({})


def test_full_layer_table_degrades_gameplay(assembler, templates, store):
    table = TagManager()
    for index in range(FIRST_USER_LAYER, LAYER_COUNT):
        table.layers[index] = f"Taken{index}"
    store.write_model(TAG_MANAGER_PATH, table)

    _, scene = assembler.assemble(templates)

    assert scene.find("Ground").layer == 0
    assert len(assembler.degraded) == 1
    assert store.exists(scene.path)


def test_unresolved_reference_blocks_save(assembler, store):
    scene = assembler.new_scene(GAMEPLAY)
    dangling = Node(name="Broken")
    dangling.add_component("CameraFollow", target=ObjectRef(file_id="does-not-exist"))
    scene.add_root(dangling)

    with pytest.raises(WiringError):
        assembler.save(scene)
    assert not store.exists(scene.path)


def test_reference_to_unknown_document_is_rejected(assembler, store):
    scene = assembler.new_scene(MAIN_MENU)
    scene.deactivate_on_load.append(ObjectRef(guid="0" * 32, file_id="abc"))

    with pytest.raises(WiringError):
        validate_references(scene, store)


def test_reference_to_missing_component_is_rejected(assembler, store):
    scene = assembler.new_scene(MAIN_MENU)
    camera = scene.find(MAIN_CAMERA)
    camera.add_component("CameraFollow", target=camera.ref("Rigidbody"))

    with pytest.raises(WiringError):
        validate_references(scene, store)


def test_failed_gameplay_write_leaves_no_menu_behind(assembler, templates, store, workspace):
    store.absolute(workspace.scene_path(GAMEPLAY)).mkdir()

    with pytest.raises(StorageError):
        assembler.assemble(templates)

    assert not store.exists(workspace.scene_path(MAIN_MENU))


def test_broken_scene_blocks_the_whole_batch(assembler, store):
    menu = assembler.new_scene(MAIN_MENU)
    gameplay = assembler.new_scene(GAMEPLAY)
    gameplay.find(MAIN_CAMERA).add_component("CameraFollow", target=ObjectRef(file_id="does-not-exist"))

    with pytest.raises(WiringError):
        assembler.save(menu, gameplay)

    assert not store.exists(menu.path)
    assert not store.exists(gameplay.path)


def test_scenes_saved_together_may_reference_each_other(assembler, store):
    menu = assembler.new_scene(MAIN_MENU)
    gameplay = assembler.new_scene(GAMEPLAY)
    gameplay.deactivate_on_load.append(menu.ref(menu.find(MAIN_CAMERA).file_id))
    menu.deactivate_on_load.append(gameplay.ref(gameplay.find(MAIN_CAMERA).file_id, "Camera"))

    assembler.save(gameplay, menu)

    assert store.exists(menu.path) and store.exists(gameplay.path)


def test_reference_into_batch_must_name_an_existing_node(assembler, store):
    menu = assembler.new_scene(MAIN_MENU)
    gameplay = assembler.new_scene(GAMEPLAY)
    gameplay.deactivate_on_load.append(menu.ref("not-a-node"))

    with pytest.raises(WiringError):
        validate_references(gameplay, store, [menu])
