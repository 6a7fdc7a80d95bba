# Check registry and selection.
#
# The registry is an ordered list of (CheckId, analyzer) pairs. Registering the
# same CheckId twice keeps both entries; both run, in registration order.
# Selection only filters: it never adds or reorders entries.

from __future__ import annotations

import logging
from typing import Iterator

from .types import Analyzer, CheckEntry, CheckId, RunConfig

logger = logging.getLogger(__name__)


class CheckRegistry:
    """Ordered collection of checks available to the runner."""

    def __init__(self) -> None:
        self._entries: list[CheckEntry] = []

    def register(self, check_id: CheckId, analyzer: Analyzer) -> CheckEntry:
        if not isinstance(check_id, CheckId):
            raise TypeError(f"check_id must be a CheckId, got: {type(check_id).__name__}")
        if not callable(analyzer):
            raise TypeError(f"analyzer for {check_id.value} is not callable")
        entry = CheckEntry(check_id=check_id, analyzer=analyzer)
        self._entries.append(entry)
        logger.debug(f"Registered check '{check_id.value}' ({len(self._entries)} total)")
        return entry

    @property
    def entries(self) -> tuple[CheckEntry, ...]:
        return tuple(self._entries)

    def select(self, config: RunConfig) -> list[CheckEntry]:
        return [entry for entry in self._entries if config.is_enabled(entry.check_id)]

    def __iter__(self) -> Iterator[CheckEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)


def select(registry: CheckRegistry, config: RunConfig) -> list[CheckEntry]:
    """Entries of `registry` whose category is enabled in `config`, in registration order."""
    return registry.select(config)


def build_default_registry() -> CheckRegistry:
    """Registry with the four built-in checks: geometry, shaders, layers, variants."""
    # Lazy import keeps core importable without pulling in the USD bindings
    from ..checks import geometry, layers, shaders, variants

    registry = CheckRegistry()
    registry.register(CheckId.GEOMETRY, geometry.validate_geometry)
    registry.register(CheckId.SHADERS, shaders.validate_shaders)
    registry.register(CheckId.LAYERS, layers.validate_layer_structure)
    registry.register(CheckId.VARIANTS, variants.validate_variants)
    return registry
