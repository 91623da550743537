"""Error taxonomy for the generation pipeline.

Every fatal error carries the name of the stage that raised it so the
entry points can report ``[stage] message`` without inspecting tracebacks.
"""
from __future__ import annotations


class GenerationError(Exception):
    """Base class for pipeline failures."""

    def __init__(self, message: str, *, stage: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class StorageError(GenerationError):
    """Filesystem or persistence failure. Fatal."""


class TypeResolutionError(GenerationError):
    """A component type expected from the build is not available. Fatal."""

    def __init__(self, type_name: str, *, stage: str | None = None):
        super().__init__(
            f"Component type '{type_name}' is not available; "
            "the script build did not publish it (check the compile errors above).",
            stage=stage,
        )
        self.type_name = type_name


class WiringError(GenerationError):
    """A reference inside a document does not resolve. Fatal, raised before save."""


class RegistryExhausted(GenerationError):
    """No empty slot left in the layer table. Non-fatal."""


class BuildFailure(GenerationError):
    """The external build finished with errors.

    Never propagated past the build host: it is folded into the
    ``BuildResult`` so the compile barrier still fires.
    """


class RunReplaced(GenerationError):
    """A newer run took over the compile barrier before this one resumed."""
