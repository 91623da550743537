"""Build settings manifest: the ordered list of loadable scenes."""
from __future__ import annotations

import logging
from typing import Sequence

from .models import BuildSettings, ManifestEntry, SceneAsset
from .store import AssetStore

logger = logging.getLogger(__name__)

BUILD_SETTINGS_PATH = "ProjectSettings/EditorBuildSettings.asset"


def register_scenes(store: AssetStore, scenes: Sequence[SceneAsset]) -> BuildSettings:
    """Overwrite the manifest with ``scenes``, in order, all enabled.

    The position in the list is the runtime build index.
    """
    settings = BuildSettings(
        scenes=[ManifestEntry(path=scene.path, enabled=True, guid=scene.guid) for scene in scenes]
    )
    store.write_model(BUILD_SETTINGS_PATH, settings)
    logger.debug("Build settings now list %d scene(s)", len(settings.scenes))
    return settings


def load_build_settings(store: AssetStore) -> BuildSettings:
    return store.read_model_or_default(BUILD_SETTINGS_PATH, BuildSettings)
