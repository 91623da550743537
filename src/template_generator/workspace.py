"""Workspace folder topology."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import cfg
from .errors import StorageError

logger = logging.getLogger(__name__)

PREFABS_DIR = "Prefabs"
SCENES_DIR = "Scenes"
SCRIPTS_DIR = "Scripts"
SETTINGS_DIR = "Settings"
SUBDIRECTORIES = (PREFABS_DIR, SCENES_DIR, SCRIPTS_DIR, SETTINGS_DIR)

PREFAB_EXTENSION = ".prefab"
SCENE_EXTENSION = ".unity"
INPUT_ACTIONS_NAME = "InputActions.inputactions"


@dataclass(frozen=True)
class Workspace:
    """The template root inside a project, plus its four fixed subfolders."""
    project_root: Path
    root: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "project_root", Path(self.project_root).resolve())
        if not self.root:
            object.__setattr__(self, "root", cfg.template_root)
        object.__setattr__(self, "root", self.root.replace("\\", "/").strip("/"))

    # Project-relative paths (forward slashes), used for asset addressing.

    def rel(self, *parts: str) -> str:
        return "/".join((self.root, *parts))

    @property
    def prefabs(self) -> str:
        return self.rel(PREFABS_DIR)

    @property
    def scenes(self) -> str:
        return self.rel(SCENES_DIR)

    @property
    def scripts(self) -> str:
        return self.rel(SCRIPTS_DIR)

    @property
    def settings(self) -> str:
        return self.rel(SETTINGS_DIR)

    def prefab_path(self, name: str) -> str:
        return self.rel(PREFABS_DIR, name + PREFAB_EXTENSION)

    def scene_path(self, name: str) -> str:
        return self.rel(SCENES_DIR, name + SCENE_EXTENSION)

    def input_actions_path(self) -> str:
        return self.rel(SETTINGS_DIR, INPUT_ACTIONS_NAME)

    def absolute(self, rel_path: str) -> Path:
        return self.project_root / rel_path

    @property
    def directories(self) -> list[Path]:
        return [self.absolute(self.rel(name)) for name in SUBDIRECTORIES]

    def ensure(self) -> list[Path]:
        """Create every missing folder; existing ones are left alone.

        Returns the folders that were actually created.
        """
        created: list[Path] = []
        for directory in [self.absolute(self.root), *self.directories]:
            if directory.is_dir():
                continue
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageError(f"Failed to create {directory}: {exc}") from exc
            created.append(directory)
            logger.debug("Created folder %s", directory)
        return created
