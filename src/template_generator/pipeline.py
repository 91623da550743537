"""Generation pipeline: scaffold, emit scripts, wait for the build, assemble assets.

``TemplateGenerator.generate()`` runs the first two stages synchronously,
subscribes to the compile barrier, starts the build and hands control back
to the event loop. Everything else runs inside the barrier continuation.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from functools import partial
from pathlib import Path
from typing import Iterator

from .artifacts import emit_artifacts
from .barrier import CompileBarrier, get_compile_barrier
from .build_settings import register_scenes
from .compiler import BuildResult, ComponentTypeRegistry, EditorHost, ScriptCompiler
from .config import cfg
from .errors import GenerationError, RunReplaced, StorageError
from .input_actions import build_input_actions
from .models import GenerationSummary
from .scenes import GameContext, SceneAssembler
from .store import AssetStore
from .templates import TemplateAssembler
from .workspace import Workspace

logger = logging.getLogger(__name__)

STAGE_SCAFFOLD = "scaffold"
STAGE_ARTIFACTS = "artifacts"
STAGE_COMPILE = "compile"
STAGE_INPUT_ACTIONS = "input_actions"
STAGE_TEMPLATES = "templates"
STAGE_SCENES = "scenes"
STAGE_BUILD_SETTINGS = "build_settings"
STAGE_OPEN_SCENE = "open_scene"

RUN_REPLACED_MESSAGE = "Generation was replaced by another run before it finished."

TMP_RESOURCES_WARNING = (
    "If you haven't, import 'TextMesh Pro Essential Resources' "
    "(Window > TextMeshPro > Import TMP Essential Resources) so the UI text displays correctly."
)


@contextmanager
def _stage(name: str) -> Iterator[None]:
    """Tag errors raised inside a stage with the stage name."""
    try:
        yield
    except GenerationError as exc:
        if exc.stage is None:
            exc.stage = name
        raise
    except OSError as exc:
        raise StorageError(str(exc), stage=name) from exc


def _retire_future(future: asyncio.Future) -> None:
    if not future.done():
        future.set_exception(RunReplaced(RUN_REPLACED_MESSAGE, stage=STAGE_COMPILE))


class TemplateGenerator:
    """One generation run over one project root."""

    def __init__(
        self,
        project_root: Path | str = ".",
        *,
        host: EditorHost | None = None,
        barrier: CompileBarrier | None = None,
        template_root: str | None = None,
    ):
        self.workspace = Workspace(Path(project_root), template_root or "")
        self.store = AssetStore(self.workspace.project_root)
        self.host = host if host is not None else ScriptCompiler(self.workspace)
        self.barrier = barrier if barrier is not None else get_compile_barrier()
        self.types = ComponentTypeRegistry()
        self.summary = self._new_summary()

    def _new_summary(self) -> GenerationSummary:
        return GenerationSummary(
            project_root=str(self.workspace.project_root),
            workspace=self.workspace.root,
        )

    def generate(self) -> asyncio.Future:
        """Start a run; the returned future resolves to the ``GenerationSummary``.

        Must be called from a running event loop. Returns as soon as the build
        has been requested.
        """
        loop = asyncio.get_running_loop()
        self.summary = self._new_summary()
        self.types = ComponentTypeRegistry()

        logger.info("Generating C# scripts...")
        with _stage(STAGE_SCAFFOLD):
            self.workspace.ensure()
        with _stage(STAGE_ARTIFACTS):
            written = emit_artifacts(self.workspace)
        self.summary.artifacts = [self.store.relative(path) for path in written]
        logger.info("All scripts generated successfully.")

        future = loop.create_future()
        subscription = self.barrier.subscribe(
            partial(self._on_scripts_compiled, future),
            on_cancel=partial(_retire_future, future),
        )
        logger.info("Refreshing assets and compiling scripts...")
        try:
            with _stage(STAGE_COMPILE):
                self.barrier.trigger(self.host, subscription)
        except Exception:
            self.barrier.cancel()
            raise
        return future

    async def run(self) -> GenerationSummary:
        return await self.generate()

    def _on_scripts_compiled(self, future: asyncio.Future, build: BuildResult) -> None:
        if future.done():
            return
        try:
            summary = self.create_template_assets(build)
        except GenerationError as exc:
            logger.error("Template generation aborted: %s", exc)
            future.set_exception(exc)
        except Exception as exc:
            logger.exception("Template generation failed unexpectedly")
            future.set_exception(exc)
        else:
            future.set_result(summary)

    def create_template_assets(self, build: BuildResult) -> GenerationSummary:
        """Every stage after the compile barrier, run to completion."""
        self.types.publish(build)
        self.summary.build_succeeded = build.success
        self.summary.build_errors = list(build.errors)
        if build.success:
            logger.info("Script compilation complete. Now creating assets...")
        else:
            logger.error(
                "Script compilation finished with %d error(s); assets needing script types will fail.",
                len(build.errors),
            )

        with _stage(STAGE_INPUT_ACTIONS):
            logger.info("Creating Input Actions asset...")
            input_actions = build_input_actions(self.store, self.workspace)
        self.summary.input_actions = input_actions.path

        with _stage(STAGE_TEMPLATES):
            logger.info("Creating core gameplay prefabs...")
            templates = TemplateAssembler(self.store, self.workspace, self.types, input_actions).assemble()
        self.summary.templates = {name: prefab.path for name, prefab in templates.items()}
        logger.info("Prefabs created successfully!")

        with _stage(STAGE_SCENES):
            logger.info("Creating MainMenu and Gameplay scenes...")
            context = GameContext.create(self.types)
            assembler = SceneAssembler(self.store, self.workspace, self.types, context)
            main_menu, gameplay = assembler.assemble(templates)
        self.summary.scenes = {scene.name: scene.path for scene in (main_menu, gameplay)}
        self.summary.degraded.extend(assembler.degraded)
        logger.info("Scenes created successfully!")

        with _stage(STAGE_BUILD_SETTINGS):
            logger.info("Adding scenes to Build Settings...")
            settings = register_scenes(self.store, [main_menu, gameplay])
        self.summary.manifest = list(settings.scenes)
        logger.info("Build Settings configured!")

        if not self.store.exists(cfg.tmp_settings_path):
            logger.warning(TMP_RESOURCES_WARNING)
            self.summary.warnings.append(TMP_RESOURCES_WARNING)

        logger.info("Twin-stick template generation complete! Opening %s.", main_menu.name)
        with _stage(STAGE_OPEN_SCENE):
            self.host.open_scene(main_menu.path)
        self.summary.opened_scene = main_menu.path

        if self.summary.degraded:
            logger.warning(
                "Generation finished with %d degraded step(s): %s",
                len(self.summary.degraded),
                "; ".join(self.summary.degraded),
            )
        return self.summary


async def generate_template(project_root: Path | str = ".", **kwargs) -> GenerationSummary:
    """Run the whole pipeline once and return its summary."""
    return await TemplateGenerator(project_root, **kwargs).run()
