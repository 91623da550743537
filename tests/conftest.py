"""Pytest configuration for twinstick-template tests."""
import sys
from pathlib import Path

import pytest

# Add src directory to Python path so tests can import template_generator, cli, services.
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep user configuration and process-wide run state out of every test."""
    for var in (
        "TWINSTICK_TEMPLATE_ROOT",
        "TWINSTICK_BUILD_COMMAND",
        "TWINSTICK_BUILD_TIMEOUT",
        "TWINSTICK_TMP_SETTINGS_PATH",
        "TWINSTICK_OUTPUT_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)

    from template_generator.barrier import set_compile_barrier
    from cli.utils.config import set_config

    set_compile_barrier(None)
    set_config(None)
    yield
    set_compile_barrier(None)
    set_config(None)


@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "MyGame"
    root.mkdir()
    return root
