"""Twin-stick shooter template generator.

Scaffolds a project workspace, emits the gameplay scripts, waits for them to
compile, then assembles input bindings, prefabs, scenes and build settings.
"""

from .barrier import CompileBarrier, Subscription, get_compile_barrier, set_compile_barrier
from .compiler import BuildResult, ComponentTypeRegistry, ScriptCompiler
from .errors import (
    BuildFailure,
    GenerationError,
    RegistryExhausted,
    RunReplaced,
    StorageError,
    TypeResolutionError,
    WiringError,
)
from .models import GenerationSummary
from .pipeline import TemplateGenerator, generate_template
from .workspace import Workspace

__all__ = [
    "BuildFailure",
    "BuildResult",
    "CompileBarrier",
    "ComponentTypeRegistry",
    "GenerationError",
    "GenerationSummary",
    "RegistryExhausted",
    "RunReplaced",
    "ScriptCompiler",
    "StorageError",
    "Subscription",
    "TemplateGenerator",
    "TypeResolutionError",
    "WiringError",
    "Workspace",
    "generate_template",
    "get_compile_barrier",
    "set_compile_barrier",
]
