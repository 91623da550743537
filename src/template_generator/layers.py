"""Layer table in ``ProjectSettings/TagManager.asset``."""
from __future__ import annotations

import logging

from .errors import RegistryExhausted
from .models import FIRST_USER_LAYER, TagManager
from .store import AssetStore

logger = logging.getLogger(__name__)

TAG_MANAGER_PATH = "ProjectSettings/TagManager.asset"


def find_layer(table: TagManager, name: str) -> int | None:
    for index in range(FIRST_USER_LAYER, len(table.layers)):
        if table.layers[index] == name:
            return index
    return None


def add_layer(table: TagManager, name: str) -> int:
    """Put ``name`` in the first empty user slot and return its index.

    Raises ``RegistryExhausted`` when every user slot is taken.
    """
    if not name:
        raise ValueError("Layer name must not be empty")
    existing = find_layer(table, name)
    if existing is not None:
        return existing
    for index in range(FIRST_USER_LAYER, len(table.layers)):
        if not table.layers[index]:
            table.layers[index] = name
            return index
    raise RegistryExhausted(
        f"No free layer slot for '{name}' (slots {FIRST_USER_LAYER}-{len(table.layers) - 1} are all in use)"
    )


def ensure_layer(store: AssetStore, name: str) -> int | None:
    """Make sure layer ``name`` exists; returns its index.

    Already present: nothing is written. Table full: a warning is logged,
    the table is left untouched and ``None`` is returned.
    """
    table = store.read_model_or_default(TAG_MANAGER_PATH, TagManager)
    existing = find_layer(table, name)
    if existing is not None:
        logger.debug("Layer '%s' already exists at index %d", name, existing)
        return existing
    try:
        index = add_layer(table, name)
    except RegistryExhausted as exc:
        logger.warning("Layer '%s' was not created: %s", name, exc.message)
        return None
    store.write_model(TAG_MANAGER_PATH, table)
    logger.info("Layer '%s' created.", name)
    return index
