"""Pydantic data models for the generated project: node graphs and documents."""
from __future__ import annotations

import secrets
from typing import Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

LAYER_COUNT = 32
FIRST_USER_LAYER = 8
BUILTIN_LAYERS: list[str] = [
    "Default",
    "TransparentFX",
    "Ignore Raycast",
    "",
    "Water",
    "UI",
    "",
    "",
]


def new_file_id() -> str:
    """Return a fresh node identifier, unique within any document."""
    return secrets.token_hex(8)


# --- References ---

class ObjectRef(BaseModel):
    """Reference to a node (and optionally one of its components).

    ``guid`` names the owning document; ``None`` means "the document this
    reference is stored in".
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    guid: str | None = None
    file_id: str | None = None
    component: str | None = None

    @property
    def is_local(self) -> bool:
        return self.guid is None


class PersistentCall(BaseModel):
    """A serialized callback: invoke ``method`` on the referenced component."""
    model_config = ConfigDict(extra="forbid")

    target: ObjectRef
    method: str


FieldValue = Union[ObjectRef, list[PersistentCall], list[float], bool, int, float, str, None]


# --- Node graph ---

class Transform(BaseModel):
    position: list[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    rotation: list[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    scale: list[float] = Field(default_factory=lambda: [1.0, 1.0, 1.0])


class RectLayout(BaseModel):
    """Anchored layout of a UI node, in parent-relative units."""
    anchor_min: list[float] = Field(default_factory=lambda: [0.5, 0.5])
    anchor_max: list[float] = Field(default_factory=lambda: [0.5, 0.5])
    pivot: list[float] = Field(default_factory=lambda: [0.5, 0.5])
    anchored_position: list[float] = Field(default_factory=lambda: [0.0, 0.0])
    size: list[float] = Field(default_factory=lambda: [100.0, 100.0])

    @classmethod
    def stretch(cls) -> "RectLayout":
        """Fill the parent rect completely."""
        return cls(anchor_min=[0.0, 0.0], anchor_max=[1.0, 1.0], size=[0.0, 0.0])


class Component(BaseModel):
    type: str
    fields: dict[str, FieldValue] = Field(default_factory=dict)


class Node(BaseModel):
    """One object in a template or scene, with its components and children."""
    file_id: str = Field(default_factory=new_file_id)
    name: str
    tag: str = "Untagged"
    layer: int = 0
    active: bool = True
    persistent: bool = False               # survives scene loads
    transform: Transform = Field(default_factory=Transform)
    rect: RectLayout | None = None
    components: list[Component] = Field(default_factory=list)
    children: list[Node] = Field(default_factory=list)
    prefab: ObjectRef | None = None        # source template of an instance

    def add_component(self, type_name: str, **fields: FieldValue) -> Component:
        component = Component(type=type_name, fields=dict(fields))
        self.components.append(component)
        return component

    def get_component(self, type_name: str) -> Component | None:
        for component in self.components:
            if component.type == type_name:
                return component
        return None

    def require_component(self, type_name: str) -> Component:
        component = self.get_component(type_name)
        if component is None:
            raise KeyError(f"Node '{self.name}' has no {type_name} component")
        return component

    def add_child(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def walk(self) -> Iterator[Node]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> Node | None:
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def ref(self, component: str | None = None, *, guid: str | None = None) -> ObjectRef:
        return ObjectRef(guid=guid, file_id=self.file_id, component=component)


# --- Documents ---

class AssetDocument(BaseModel):
    """Base for every persisted document that can be referenced by guid."""
    guid: str
    name: str
    path: str                              # project-relative, forward slashes

    def ref(self, file_id: str | None = None, component: str | None = None) -> ObjectRef:
        return ObjectRef(guid=self.guid, file_id=file_id, component=component)

    def iter_nodes(self) -> Iterator[Node]:
        return iter(())

    def iter_references(self) -> Iterator[tuple[str, ObjectRef]]:
        """Yield ``(location, reference)`` for every reference in the document."""
        for node in self.iter_nodes():
            if node.prefab is not None:
                yield f"{node.name}.prefab", node.prefab
            for component in node.components:
                for field_name, value in component.fields.items():
                    location = f"{node.name}.{component.type}.{field_name}"
                    if isinstance(value, ObjectRef):
                        yield location, value
                    elif isinstance(value, list):
                        for call in value:
                            if isinstance(call, PersistentCall):
                                yield location, call.target

    def find(self, name: str) -> Node | None:
        for node in self.iter_nodes():
            if node.name == name:
                return node
        return None

    def has_node(self, file_id: str) -> bool:
        return any(node.file_id == file_id for node in self.iter_nodes())


class PrefabAsset(AssetDocument):
    """A reusable object template."""
    kind: Literal["prefab"] = "prefab"
    root: Node

    def iter_nodes(self) -> Iterator[Node]:
        return self.root.walk()

    def root_ref(self, component: str | None = None) -> ObjectRef:
        return self.ref(self.root.file_id, component)


class SceneAsset(AssetDocument):
    """A loadable scene: root nodes plus load-time directives."""
    kind: Literal["scene"] = "scene"
    roots: list[Node] = Field(default_factory=list)
    deactivate_on_load: list[ObjectRef] = Field(default_factory=list)

    def add_root(self, node: Node) -> Node:
        self.roots.append(node)
        return node

    def remove_root(self, name: str) -> Node | None:
        for index, node in enumerate(self.roots):
            if node.name == name:
                return self.roots.pop(index)
        return None

    def iter_nodes(self) -> Iterator[Node]:
        for root in self.roots:
            yield from root.walk()

    def iter_references(self) -> Iterator[tuple[str, ObjectRef]]:
        yield from super().iter_references()
        for ref in self.deactivate_on_load:
            yield "deactivate_on_load", ref


# --- Input bindings ---

class InputBinding(BaseModel):
    name: str = ""
    path: str = ""
    action: str
    is_composite: bool = False
    is_part_of_composite: bool = False


class InputAction(BaseModel):
    name: str
    type: Literal["Value", "Button", "PassThrough"]
    expected_control_type: str = ""


class InputActionMap(BaseModel):
    name: str
    actions: list[InputAction] = Field(default_factory=list)
    bindings: list[InputBinding] = Field(default_factory=list)

    @field_validator("actions")
    @classmethod
    def _unique_action_names(cls, actions: list[InputAction]) -> list[InputAction]:
        seen: set[str] = set()
        for action in actions:
            if action.name in seen:
                raise ValueError(f"duplicate action name '{action.name}'")
            seen.add(action.name)
        return actions

    def action(self, name: str) -> InputAction | None:
        return next((a for a in self.actions if a.name == name), None)

    def bindings_for(self, action: str) -> list[InputBinding]:
        return [b for b in self.bindings if b.action == action]


class InputActionAsset(AssetDocument):
    kind: Literal["input_actions"] = "input_actions"
    maps: list[InputActionMap] = Field(default_factory=list)

    def find_map(self, name: str) -> InputActionMap | None:
        return next((m for m in self.maps if m.name == name), None)


# --- Project settings ---

class ManifestEntry(BaseModel):
    path: str
    enabled: bool = True
    guid: str | None = None


class BuildSettings(BaseModel):
    """Ordered list of loadable scenes; the index is the runtime load index."""
    scenes: list[ManifestEntry] = Field(default_factory=list)

    @field_validator("scenes")
    @classmethod
    def _unique_paths(cls, scenes: list[ManifestEntry]) -> list[ManifestEntry]:
        paths = [entry.path for entry in scenes]
        if len(paths) != len(set(paths)):
            raise ValueError("build settings scene paths must be unique")
        return scenes


class TagManager(BaseModel):
    tags: list[str] = Field(default_factory=list)
    layers: list[str] = Field(
        default_factory=lambda: BUILTIN_LAYERS + [""] * (LAYER_COUNT - len(BUILTIN_LAYERS))
    )

    @field_validator("layers")
    @classmethod
    def _fixed_size(cls, layers: list[str]) -> list[str]:
        if len(layers) != LAYER_COUNT:
            raise ValueError(f"layer table must have exactly {LAYER_COUNT} slots, got {len(layers)}")
        return layers


# --- Run output ---

class GenerationSummary(BaseModel):
    """What a pipeline run produced, for logs and the CLI/tool surfaces."""
    project_root: str
    workspace: str
    artifacts: list[str] = Field(default_factory=list)
    build_succeeded: bool = False
    build_errors: list[str] = Field(default_factory=list)
    input_actions: str | None = None
    templates: dict[str, str] = Field(default_factory=dict)
    scenes: dict[str, str] = Field(default_factory=dict)
    manifest: list[ManifestEntry] = Field(default_factory=list)
    opened_scene: str | None = None
    warnings: list[str] = Field(default_factory=list)
    degraded: list[str] = Field(default_factory=list)


Node.model_rebuild()
