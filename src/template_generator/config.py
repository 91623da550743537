"""Centralized configuration for the template generator.

Loads settings from a .env file (if present) next to this module, then
falls back to environment variables, then to hardcoded defaults.

Usage in other modules:
    from template_generator.config import cfg

    root    = cfg.template_root
    command = cfg.build_command
"""
from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# .env loader (no dependency on python-dotenv)
# ---------------------------------------------------------------------------

_ENV_DIR = Path(__file__).resolve().parent


def _load_dotenv(directory: Path = _ENV_DIR) -> None:
    """Parse a .env file and inject values into os.environ.

    Only sets a variable if it is NOT already present in the environment,
    so real env vars always win.
    """
    env_file = directory / ".env"
    if not env_file.is_file():
        return
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip().strip("'\"")
        if key and key not in os.environ:
            os.environ[key] = value


_load_dotenv()


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE_ROOT = "Assets/TwinStickTemplate"
DEFAULT_BUILD_TIMEOUT = 120.0
MIN_BUILD_TIMEOUT = 1.0
MAX_BUILD_TIMEOUT = 600.0
DEFAULT_TMP_SETTINGS_PATH = "Assets/TextMesh Pro/Resources/TMP Settings.asset"


class _Config:
    """Read-only configuration object. All values resolve at access time so
    they pick up any later changes to os.environ."""

    # ── Workspace ────────────────────────────────────────────────────

    @property
    def template_root(self) -> str:
        """Workspace root, relative to the project root."""
        value = os.environ.get("TWINSTICK_TEMPLATE_ROOT", "").strip()
        return value or DEFAULT_TEMPLATE_ROOT

    @property
    def tmp_settings_path(self) -> str:
        return os.environ.get("TWINSTICK_TMP_SETTINGS_PATH", DEFAULT_TMP_SETTINGS_PATH)

    # ── External build ───────────────────────────────────────────────

    @property
    def build_command(self) -> str | None:
        """Shell-style command that compiles the emitted scripts, if any."""
        value = os.environ.get("TWINSTICK_BUILD_COMMAND", "").strip()
        return value or None

    @property
    def build_timeout(self) -> float:
        """Seconds to wait for the external build (clamped)."""
        val = os.environ.get("TWINSTICK_BUILD_TIMEOUT", str(DEFAULT_BUILD_TIMEOUT))
        try:
            timeout = float(val)
        except ValueError:
            return DEFAULT_BUILD_TIMEOUT
        return max(MIN_BUILD_TIMEOUT, min(timeout, MAX_BUILD_TIMEOUT))

    # ── CLI ──────────────────────────────────────────────────────────

    @property
    def output_format(self) -> str:
        value = os.environ.get("TWINSTICK_OUTPUT_FORMAT", "text").strip().lower()
        return value if value in ("text", "json") else "text"


cfg = _Config()
