"""Persistence primitive: atomic JSON documents addressed by project-relative path."""
from __future__ import annotations

import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from .errors import StorageError
from .models import AssetDocument

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Fixed namespace so a path always maps to the same guid across runs.
_GUID_NAMESPACE = uuid.UUID("6f1c3e0a-2b7d-4c59-9a43-7d2f0e8b5a11")


def asset_guid(path: str) -> str:
    """Deterministic guid for a project-relative asset path."""
    return uuid.uuid5(_GUID_NAMESPACE, path.replace("\\", "/")).hex


def atomic_write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a sibling temp file and a rename.

    Readers never observe a partially written file; on failure the previous
    content (if any) is left in place.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Failed to remove temp file %s", tmp_name, exc_info=True)
            raise
    except OSError as exc:
        raise StorageError(f"Failed to write {path}: {exc}") from exc


class AssetStore:
    """Saves and loads documents under one project root.

    Tracks the guid of every asset saved through it so reference checks can
    tell whether a cross-document reference points at something that exists.
    """

    def __init__(self, project_root: Path | str):
        self.project_root = Path(project_root).resolve()
        self._index: dict[str, str] = {}

    def absolute(self, rel_path: str) -> Path:
        return self.project_root / rel_path

    def relative(self, path: Path) -> str:
        return Path(path).resolve().relative_to(self.project_root).as_posix()

    def exists(self, rel_path: str) -> bool:
        return self.absolute(rel_path).is_file()

    def knows(self, guid: str) -> bool:
        return guid in self._index

    def write_model(self, rel_path: str, model: BaseModel) -> Path:
        target = self.absolute(rel_path)
        atomic_write_text(target, model.model_dump_json(indent=2) + "\n")
        logger.debug("Saved %s", rel_path)
        return target

    def read_model(self, rel_path: str, model_cls: type[ModelT]) -> ModelT:
        source = self.absolute(rel_path)
        try:
            raw = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to read {rel_path}: {exc}") from exc
        try:
            return model_cls.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"{rel_path} is not a valid {model_cls.__name__}: {exc}") from exc

    def read_model_or_default(self, rel_path: str, model_cls: type[ModelT]) -> ModelT:
        if not self.exists(rel_path):
            return model_cls()
        return self.read_model(rel_path, model_cls)

    def save_asset(self, asset: AssetDocument) -> Path:
        """Persist an asset document and register its guid."""
        target = self.write_model(asset.path, asset)
        self._index[asset.guid] = asset.path
        return target

    def load_asset(self, rel_path: str, model_cls: type[ModelT]) -> ModelT:
        asset = self.read_model(rel_path, model_cls)
        if isinstance(asset, AssetDocument):
            self._index[asset.guid] = asset.path
        return asset
