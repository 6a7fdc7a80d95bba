# Shared data types for the usdcheck engine.
#
# Public API:
# - CheckId: fixed set of check categories
# - Outcome: immutable result of one analyzer run
# - CheckEntry: (CheckId, analyzer) pair held by the registry
# - RunConfig: which checks to run and where to export the transcript
# - RunConfigError: raised when a RunConfig cannot be executed

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional


class RunConfigError(Exception):
    """Raised when a run configuration is rejected before any scene is opened."""
    pass


class CheckId(Enum):
    """Check categories known to the engine"""
    GEOMETRY = "geometry"
    SHADERS = "shaders"
    LAYERS = "layers"
    VARIANTS = "variants"


@dataclass(frozen=True)
class Outcome:
    """Result of a single analyzer run"""
    identifier: str
    passed: bool
    message: str
    duration_ms: Optional[float] = field(default=None, compare=False)

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"

    def __str__(self) -> str:
        return f"[{self.status}] {self.identifier}: {self.message}"


# An analyzer takes an opened Usd.Stage (or None) and always returns an Outcome.
Analyzer = Callable[[Any], Outcome]


@dataclass(frozen=True)
class CheckEntry:
    check_id: CheckId
    analyzer: Analyzer


@dataclass(frozen=True)
class RunConfig:
    """Which checks run for one invocation. Built once, never mutated."""
    run_geometry: bool = True
    run_shaders: bool = True
    run_layers: bool = True
    run_variants: bool = True
    output_path: Optional[str] = None

    def _flags(self) -> dict[CheckId, bool]:
        return {
            CheckId.GEOMETRY: self.run_geometry,
            CheckId.SHADERS: self.run_shaders,
            CheckId.LAYERS: self.run_layers,
            CheckId.VARIANTS: self.run_variants,
        }

    def is_enabled(self, check_id: CheckId) -> bool:
        return self._flags().get(check_id, False)

    def enabled_checks(self) -> list[CheckId]:
        return [cid for cid, on in self._flags().items() if on]

    def has_enabled_checks(self) -> bool:
        return any(self._flags().values())

    def validate(self) -> None:
        if not self.has_enabled_checks():
            raise RunConfigError("Cannot skip all tests. At least one test must run.")

    @classmethod
    def from_flags(
        cls,
        only: Optional[CheckId] = None,
        skip: Iterable[CheckId] = (),
        output_path: Optional[str] = None,
    ) -> "RunConfig":
        """
        Build a config from an optional single "only" category and a set of skipped
        categories. Combining both is rejected; every skipped category maps to its own flag.
        """
        skipped = set(skip)
        if only is not None and skipped:
            raise RunConfigError("Cannot combine '-only' and '-skip' flags.")

        if only is not None:
            enabled = {only}
        else:
            enabled = set(CheckId) - skipped

        config = cls(
            run_geometry=CheckId.GEOMETRY in enabled,
            run_shaders=CheckId.SHADERS in enabled,
            run_layers=CheckId.LAYERS in enabled,
            run_variants=CheckId.VARIANTS in enabled,
            output_path=output_path or None,
        )
        config.validate()
        return config
