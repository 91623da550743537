"""CLI configuration shared by every command."""

from __future__ import annotations

from dataclasses import dataclass

from template_generator.config import cfg


@dataclass
class CLIConfig:
    format: str = "text"
    verbose: bool = False


_config: CLIConfig | None = None


def get_config() -> CLIConfig:
    global _config
    if _config is None:
        _config = CLIConfig(format=cfg.output_format)
    return _config


def set_config(config: CLIConfig | None) -> None:
    """Replace the active CLI configuration (``None`` resets to defaults)."""
    global _config
    _config = config
