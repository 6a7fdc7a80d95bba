# Variant check
#
# Visits every prim, including inactive, unloaded and abstract prims, and for each
# variant set:
# - the set name and its variant list must be non-empty
# - every variant must be selectable, and the prim must still resolve with it
#   selected
# Each set is probed inside a VariantSelectionGuard so the stage leaves this
# check with the selections it had on entry.
# A stage without variant sets passes.

from __future__ import annotations

import logging
from typing import Any

from pxr import Tf

from ..core.types import Outcome
from ..utils.usd_helpers import format_issues
from .variant_probe import VariantSelectionGuard, get_variant_set, probe_variant

logger = logging.getLogger(__name__)

CHECK_NAME = "Validate Variants"


def _all_prim_paths(stage: Any) -> list:
    # Paths are captured up front: probing recomposes the stage, which would
    # invalidate a live traversal.
    return [prim.GetPath() for prim in stage.TraverseAll()]


def _check_variant_set(stage: Any, path: Any, set_name: str, errors: list[str]) -> None:
    if not set_name:
        errors.append(f"Found a variant set with an empty name at: {path}")
        return

    vset = get_variant_set(stage, path, set_name)
    variant_names = list(vset.GetVariantNames()) if vset is not None else []
    if not variant_names:
        errors.append(f"Variant set '{set_name}' has no variants on prim: {path}")
        return

    guard = VariantSelectionGuard(stage, path, set_name)
    with guard:
        for variant_name in variant_names:
            if not variant_name:
                errors.append(f"Empty variant name in set '{set_name}' at: {path}")
                continue
            issue = probe_variant(stage, path, set_name, variant_name)
            if issue:
                errors.append(issue)

    if not guard.restored:
        errors.append(
            f"Failed to restore variant selection '{guard.original}' in set '{set_name}' at: {path}"
        )


def validate_variants(stage: Any) -> Outcome:
    """
    Validate variant sets and their selections on every prim of `stage`.

    Every variant of every set is selected once; the original selection of each set
    is restored before moving on, whatever happened while probing.
    """
    if stage is None:
        return Outcome(CHECK_NAME, False, "Invalid stage reference.")

    errors: list[str] = []
    found_variants = False
    probed_sets = 0

    for path in _all_prim_paths(stage):
        prim = stage.GetPrimAtPath(path)
        if not prim or not prim.IsValid():
            errors.append(f"Encountered an invalid prim at: {path}")
            continue

        try:
            set_names = list(prim.GetVariantSets().GetNames())
        except Tf.ErrorException as ex:
            logger.debug(f"Reading variant sets at {path} failed: {ex}")
            errors.append(f"Could not read variant sets at: {path}")
            continue

        if set_names:
            found_variants = True

        for set_name in set_names:
            probed_sets += 1
            _check_variant_set(stage, path, set_name, errors)

    logger.debug(f"Variant check probed {probed_sets} variant set(s), {len(errors)} issue(s)")

    if not found_variants:
        return Outcome(CHECK_NAME, True, "No variants found in the scene. That's acceptable.")

    if errors:
        return Outcome(
            CHECK_NAME,
            False,
            format_issues("Variant validation failed with the following issues:", errors),
        )

    return Outcome(CHECK_NAME, True, "All variants and their selections are valid.")
