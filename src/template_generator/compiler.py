"""Build host: compiles the emitted scripts and publishes their component types.

The host always reports completion through its callback, whether the build
succeeded or not. Whether the new types exist is decided later, when a stage
asks the ``ComponentTypeRegistry`` for them.
"""
from __future__ import annotations

import asyncio
import logging
import re
import shlex
import time
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from .config import cfg
from .errors import BuildFailure, StorageError, TypeResolutionError
from .workspace import SCRIPTS_DIR, Workspace

logger = logging.getLogger(__name__)

# Engine types that exist without compiling anything.
BUILTIN_COMPONENT_TYPES = frozenset({
    "Transform",
    "RectTransform",
    "MeshFilter",
    "MeshRenderer",
    "SphereCollider",
    "BoxCollider",
    "MeshCollider",
    "Rigidbody",
    "Camera",
    "AudioListener",
    "Light",
    "PlayerInput",
    "Canvas",
    "CanvasScaler",
    "GraphicRaycaster",
    "EventSystem",
    "StandaloneInputModule",
    "Image",
    "Button",
    "Slider",
    "TextMeshProUGUI",
})

_CLASS_DECLARATION = re.compile(r"\bpublic\s+class\s+(\w+)\s*:\s*MonoBehaviour\b")
_MAX_REPORTED_OUTPUT_LINES = 20


@dataclass(frozen=True)
class BuildResult:
    success: bool
    types: frozenset[str] = frozenset()
    errors: list[str] = field(default_factory=list)
    elapsed: float = 0.0


BuildCallback = Callable[[BuildResult], None]


class EditorHost(Protocol):
    """What the pipeline needs from the host environment."""

    def refresh(self, on_complete: BuildCallback) -> None:
        """Start a build and return immediately; call ``on_complete`` when done."""

    def open_scene(self, path: str) -> None:
        """Make ``path`` the active scene."""


class ComponentTypeRegistry:
    """Component types available to the assemblers."""

    def __init__(self, builtins: frozenset[str] = BUILTIN_COMPONENT_TYPES):
        self._builtins = frozenset(builtins)
        self._published: frozenset[str] = frozenset()

    def publish(self, result: BuildResult) -> None:
        # A failed build publishes nothing, even types from files that did compile.
        self._published = result.types if result.success else frozenset()

    def is_available(self, type_name: str) -> bool:
        return type_name in self._builtins or type_name in self._published

    def require(self, type_name: str) -> str:
        if not self.is_available(type_name):
            raise TypeResolutionError(type_name)
        return type_name


def check_script(name: str, body: str) -> tuple[str | None, list[str]]:
    """Lightweight structural check of one C# file.

    Returns the declared MonoBehaviour name (or ``None``) and a list of errors.
    """
    errors: list[str] = []
    depth = 0
    for line_number, line in enumerate(body.splitlines(), start=1):
        depth += line.count("{") - line.count("}")
        if depth < 0:
            errors.append(f"{name}({line_number}): unexpected '}}'")
            depth = 0
    if depth > 0:
        errors.append(f"{name}: {depth} unclosed '{{'")

    declared = _CLASS_DECLARATION.findall(body)
    stem = Path(name).stem
    if not declared:
        errors.append(f"{name}: no MonoBehaviour class declared")
    elif len(declared) > 1:
        errors.append(f"{name}: more than one MonoBehaviour class declared ({', '.join(declared)})")
    elif declared[0] != stem:
        errors.append(f"{name}: class '{declared[0]}' does not match the file name")

    if errors:
        return None, errors
    return declared[0], []


class ScriptCompiler:
    """Build host backed by the workspace Scripts folder.

    When a build command is configured it runs first as a subprocess in the
    project root; the scripts are then checked and their types discovered.
    """

    def __init__(
        self,
        workspace: Workspace,
        *,
        command: str | None = None,
        timeout: float | None = None,
    ):
        self.workspace = workspace
        self.command = command if command is not None else cfg.build_command
        self.timeout = float(timeout) if timeout is not None else cfg.build_timeout
        self.active_scene: str | None = None
        self._tasks: set[asyncio.Task] = set()

    def refresh(self, on_complete: BuildCallback) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.compile())
        self._tasks.add(task)

        def _done(finished: asyncio.Task) -> None:
            self._tasks.discard(finished)
            if finished.cancelled():
                result = BuildResult(success=False, errors=["Build was cancelled."])
            else:
                result = finished.result()
            on_complete(result)

        task.add_done_callback(_done)

    async def compile(self) -> BuildResult:
        """Run the build; never raises, failures are reported in the result."""
        start = time.monotonic()
        errors: list[str] = []
        types: set[str] = set()
        try:
            if self.command:
                await self._run_build_command(self.command)
            types, script_errors = await asyncio.to_thread(self._check_scripts)
            errors.extend(script_errors)
        except BuildFailure as exc:
            errors.append(exc.message)
        except OSError as exc:
            errors.append(f"Failed to read scripts: {exc}")
        except Exception as exc:
            logger.error("Unexpected build host failure", exc_info=True)
            errors.append(f"Unexpected build host failure: {exc}")

        elapsed = round(time.monotonic() - start, 3)
        if errors:
            for error in errors:
                logger.error("Compile error: %s", error)
            return BuildResult(success=False, errors=errors, elapsed=elapsed)
        logger.debug("Build published %d type(s) in %.2fs", len(types), elapsed)
        return BuildResult(success=True, types=frozenset(types), elapsed=elapsed)

    def _check_scripts(self) -> tuple[set[str], list[str]]:
        scripts_dir = self.workspace.absolute(self.workspace.rel(SCRIPTS_DIR))
        types: set[str] = set()
        errors: list[str] = []
        for path in sorted(scripts_dir.glob("*.cs")):
            declared, script_errors = check_script(path.name, path.read_text(encoding="utf-8"))
            errors.extend(script_errors)
            if declared:
                types.add(declared)
        return types, errors

    async def _run_build_command(self, command: str) -> None:
        argv = shlex.split(command)
        if not argv:
            return
        logger.info("Running build command: %s", command)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(self.workspace.project_root),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise BuildFailure(f"Could not start build command {argv[0]!r}: {exc}") from exc

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            with suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise BuildFailure(f"Build command timed out after {self.timeout:.0f}s")

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        if proc.returncode != 0:
            error_lines = [line.strip() for line in output.splitlines() if "error" in line.lower()]
            detail = "; ".join(error_lines[:_MAX_REPORTED_OUTPUT_LINES])
            message = f"Build command exited with status {proc.returncode}"
            raise BuildFailure(f"{message}: {detail}" if detail else message)
        logger.debug("Build command output:\n%s", output)

    def open_scene(self, path: str) -> None:
        if not self.workspace.absolute(path).is_file():
            raise StorageError(f"Cannot open scene {path}: file does not exist")
        self.active_scene = path
        logger.info("Opened scene %s", path)
