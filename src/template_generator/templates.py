"""Object template (prefab) assembly with two-phase reference linking.

Templates are first created and saved with every cross-template reference
left unset. A second pass reopens each template that links to another one,
patches the reference fields and saves it again. Creation follows a
topological order of the link graph so targets are built before sources.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from graphlib import CycleError, TopologicalSorter
from typing import Callable

from .compiler import ComponentTypeRegistry
from .errors import WiringError
from .models import InputActionAsset, Node, PrefabAsset, Transform
from .store import AssetStore, asset_guid
from .workspace import Workspace

logger = logging.getLogger(__name__)

PLAYER = "Player"
ENEMY = "Enemy"
PROJECTILE = "Projectile"

PLAYER_MOVE_SPEED = 5.0
PLAYER_MAX_HEALTH = 100.0
FIRE_POINT_OFFSET = [0.0, 0.0, 0.7]
ENEMY_MOVE_SPEED = 3.0
ENEMY_HEALTH = 50.0
PROJECTILE_SPEED = 20.0
PROJECTILE_DAMAGE = 10.0
PROJECTILE_LIFETIME = 3.0
PROJECTILE_SCALE = [0.2, 0.2, 0.2]

_PRIMITIVE_COLLIDERS = {
    "Sphere": "SphereCollider",
    "Cube": "BoxCollider",
    "Plane": "MeshCollider",
}


def create_primitive(name: str, shape: str, types: ComponentTypeRegistry) -> Node:
    """A node with mesh, renderer and the collider matching ``shape``."""
    collider = _PRIMITIVE_COLLIDERS.get(shape)
    if collider is None:
        raise ValueError(f"Unsupported primitive shape: {shape}")
    node = Node(name=name)
    node.add_component(types.require("MeshFilter"), mesh=shape)
    node.add_component(types.require("MeshRenderer"), material="Default-Material")
    node.add_component(types.require(collider), is_trigger=False)
    return node


@dataclass(frozen=True)
class TemplateLink:
    """``source.component.field`` must reference the root of ``target``."""
    source: str
    component: str
    field: str
    target: str


TEMPLATE_LINKS: tuple[TemplateLink, ...] = (
    TemplateLink(source=PLAYER, component="PlayerController", field="projectilePrefab", target=PROJECTILE),
)


class TemplateAssembler:
    """Builds the Player, Enemy and Projectile templates."""

    def __init__(
        self,
        store: AssetStore,
        workspace: Workspace,
        types: ComponentTypeRegistry,
        input_actions: InputActionAsset,
        links: tuple[TemplateLink, ...] = TEMPLATE_LINKS,
    ):
        self.store = store
        self.workspace = workspace
        self.types = types
        self.input_actions = input_actions
        self.links = links
        self.templates: dict[str, PrefabAsset] = {}
        self._builders: dict[str, Callable[[], Node]] = {
            PROJECTILE: self._build_projectile,
            ENEMY: self._build_enemy,
            PLAYER: self._build_player,
        }

    def creation_order(self) -> list[str]:
        sorter: TopologicalSorter[str] = TopologicalSorter({name: set() for name in self._builders})
        for link in self.links:
            for name in (link.source, link.target):
                if name not in self._builders:
                    raise WiringError(f"Template link {link} names unknown template '{name}'")
            sorter.add(link.source, link.target)
        try:
            return list(sorter.static_order())
        except CycleError as exc:
            raise WiringError(f"Template links form a cycle: {' -> '.join(exc.args[1])}") from exc

    def create_templates(self) -> dict[str, PrefabAsset]:
        """Phase one: build and save every template with links unset."""
        for name in self.creation_order():
            root = self._builders[name]()
            for link in self.links:
                if link.source == name:
                    self._link_component(root, link).fields[link.field] = None
            path = self.workspace.prefab_path(name)
            prefab = PrefabAsset(guid=asset_guid(path), name=name, path=path, root=root)
            self.store.save_asset(prefab)
            self.templates[name] = prefab
            logger.debug("Created template %s", path)
        return dict(self.templates)

    def link_templates(self) -> dict[str, PrefabAsset]:
        """Phase two: reopen sources, patch their link fields, save again."""
        by_source: dict[str, list[TemplateLink]] = defaultdict(list)
        for link in self.links:
            by_source[link.source].append(link)

        for source, links in by_source.items():
            if source not in self.templates:
                raise WiringError(f"Template '{source}' has not been created yet")
            prefab = self.store.load_asset(self.templates[source].path, PrefabAsset)
            for link in links:
                target = self.templates.get(link.target)
                if target is None:
                    raise WiringError(f"Template '{link.target}' has not been created yet")
                self._link_component(prefab.root, link).fields[link.field] = target.root_ref()
            self.store.save_asset(prefab)
            self.templates[source] = prefab
            logger.debug("Linked template %s (%d reference(s))", prefab.path, len(links))
        return dict(self.templates)

    def assemble(self) -> dict[str, PrefabAsset]:
        self.create_templates()
        return self.link_templates()

    @staticmethod
    def _link_component(root: Node, link: TemplateLink):
        component = root.get_component(link.component)
        if component is None:
            raise WiringError(f"Template '{link.source}' has no {link.component} component for '{link.field}'")
        return component

    # --- template builders ---

    def _build_projectile(self) -> Node:
        projectile = create_primitive(PROJECTILE, "Sphere", self.types)
        projectile.transform.scale = list(PROJECTILE_SCALE)
        projectile.add_component(
            self.types.require("Projectile"),
            speed=PROJECTILE_SPEED,
            damage=PROJECTILE_DAMAGE,
            lifetime=PROJECTILE_LIFETIME,
        )
        projectile.add_component(self.types.require("Rigidbody"), use_gravity=False)
        projectile.require_component("SphereCollider").fields["is_trigger"] = True
        return projectile

    def _build_enemy(self) -> Node:
        enemy = create_primitive(ENEMY, "Cube", self.types)
        enemy.tag = "Enemy"
        enemy.add_component(
            self.types.require("EnemyAI"),
            moveSpeed=ENEMY_MOVE_SPEED,
            health=ENEMY_HEALTH,
            playerTarget=None,
        )
        enemy.add_component(self.types.require("Rigidbody"), use_gravity=True)
        return enemy

    def _build_player(self) -> Node:
        player = create_primitive(PLAYER, "Sphere", self.types)
        player.tag = "Player"
        fire_point = player.add_child(
            Node(name="FirePoint", transform=Transform(position=list(FIRE_POINT_OFFSET)))
        )
        player.add_component(
            self.types.require("PlayerController"),
            moveSpeed=PLAYER_MOVE_SPEED,
            maxHealth=PLAYER_MAX_HEALTH,
            firePoint=fire_point.ref(),
        )
        player.add_component(
            self.types.require("Rigidbody"),
            use_gravity=False,
            constraints="FreezePositionY|FreezeRotationX|FreezeRotationZ",
        )
        player.add_component(
            self.types.require("PlayerInput"),
            actions=self.input_actions.ref(),
            default_action_map="Player",
            notification_behavior="SendMessages",
        )
        return player
