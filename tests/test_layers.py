import logging

import pytest

from template_generator.errors import RegistryExhausted
from template_generator.layers import TAG_MANAGER_PATH, add_layer, ensure_layer, find_layer
from template_generator.models import FIRST_USER_LAYER, LAYER_COUNT, TagManager
from template_generator.store import AssetStore


def _full_table() -> TagManager:
    table = TagManager()
    for index in range(FIRST_USER_LAYER, LAYER_COUNT):
        table.layers[index] = f"Taken{index}"
    return table


def test_add_layer_uses_first_user_slot():
    table = TagManager()

    assert add_layer(table, "Ground") == FIRST_USER_LAYER
    assert table.layers[:FIRST_USER_LAYER] == TagManager().layers[:FIRST_USER_LAYER]


def test_add_layer_is_idempotent():
    table = TagManager()
    add_layer(table, "Ground")

    assert add_layer(table, "Ground") == FIRST_USER_LAYER
    assert table.layers.count("Ground") == 1


def test_add_layer_rejects_empty_name():
    with pytest.raises(ValueError):
        add_layer(TagManager(), "")


def test_add_layer_raises_when_full():
    with pytest.raises(RegistryExhausted):
        add_layer(_full_table(), "Ground")


def test_table_must_have_all_slots():
    with pytest.raises(ValueError):
        TagManager(layers=["Default"])


def test_ensure_layer_persists_once(project_root):
    store = AssetStore(project_root)

    first = ensure_layer(store, "Ground")
    before = store.absolute(TAG_MANAGER_PATH).read_text(encoding="utf-8")
    second = ensure_layer(store, "Ground")

    assert first == second == FIRST_USER_LAYER
    assert store.absolute(TAG_MANAGER_PATH).read_text(encoding="utf-8") == before
    assert find_layer(store.read_model(TAG_MANAGER_PATH, TagManager), "Ground") == FIRST_USER_LAYER


def test_ensure_layer_warns_when_full(project_root, caplog):
    store = AssetStore(project_root)
    store.write_model(TAG_MANAGER_PATH, _full_table())
    before = store.absolute(TAG_MANAGER_PATH).read_text(encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="template_generator.layers"):
        assert ensure_layer(store, "Ground") is None

    assert any("Ground" in record.getMessage() for record in caplog.records)
    assert store.absolute(TAG_MANAGER_PATH).read_text(encoding="utf-8") == before
