"""Artifact emission: write the static script table into the workspace."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from .scripts import SCRIPT_ARTIFACTS
from .store import atomic_write_text
from .workspace import SCRIPTS_DIR, Workspace

logger = logging.getLogger(__name__)


def emit_artifacts(
    workspace: Workspace,
    artifacts: Mapping[str, str] = SCRIPT_ARTIFACTS,
) -> list[Path]:
    """Write every ``name -> body`` pair to ``<Scripts>/<name>``.

    Existing files are overwritten unconditionally, so a re-run never leaves
    more than one file per name.
    """
    written: list[Path] = []
    for name, body in artifacts.items():
        if not name or "/" in name or "\\" in name:
            raise ValueError(f"Artifact name must be a bare file name, got {name!r}")
        target = workspace.absolute(workspace.rel(SCRIPTS_DIR, name))
        atomic_write_text(target, body)
        written.append(target)
        logger.debug("Wrote %s (%d chars)", target, len(body))
    return written
