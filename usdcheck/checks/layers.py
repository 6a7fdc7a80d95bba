# Layer structure check
#
# Validates the stage's layer stack (strongest first, session layer excluded):
# - the stack must not be empty and the root layer must be readable
# - a named (non-anonymous) root layer must declare a default prim
# - no layer may be unreadable or appear twice
# - every sublayer path must resolve, and every external asset that sublayer
#   depends on must resolve too (one hop only)
# - every layer should declare root prims; references and payloads on them
#   must resolve
# Issues are reported in stack order, and within a layer as:
# duplicate id -> sublayer issues -> root prim issues.

from __future__ import annotations

import logging
from typing import Any

from ..core.types import Outcome
from ..utils.usd_helpers import external_asset_paths, format_issues, listed_items, open_layer

logger = logging.getLogger(__name__)

CHECK_NAME = "Validate Layer Structure"


def _layer_stack(stage: Any) -> list:
    return list(stage.GetLayerStack(includeSessionLayers=False))


def _check_sublayers(layer: Any, errors: list[str]) -> None:
    for sublayer_path in layer.subLayerPaths:
        sublayer = open_layer(sublayer_path, anchor=layer)
        if sublayer is None:
            errors.append(f"Unresolved sublayer: {sublayer_path}")
            continue

        for ref in external_asset_paths(sublayer):
            if open_layer(ref, anchor=sublayer) is None:
                errors.append(f"Broken external reference in sublayer: {ref}")


def _check_root_prims(layer: Any, index: int, errors: list[str]) -> None:
    root_prims = list(layer.rootPrims)
    if not root_prims:
        errors.append(
            f"Layer at index {index} has no root prim (possibly a library or session layer)."
        )
        return

    for prim_spec in root_prims:
        for ref in listed_items(prim_spec.referenceList):
            if ref.assetPath and open_layer(ref.assetPath, anchor=layer) is None:
                errors.append(f"Broken reference in layer: {ref.assetPath}")

        for payload in listed_items(prim_spec.payloadList):
            if payload.assetPath and open_layer(payload.assetPath, anchor=layer) is None:
                errors.append(f"Broken payload in layer: {payload.assetPath}")


def validate_layer_structure(stage: Any) -> Outcome:
    """
    Validate the structure and integrity of the layer stack of `stage`.

    Hard preconditions (empty stack, unreadable root layer) fail immediately with a
    single message; every other issue is collected across the whole stack.
    """
    if stage is None:
        return Outcome(CHECK_NAME, False, "Invalid stage reference.")

    layer_stack = _layer_stack(stage)
    if not layer_stack:
        return Outcome(CHECK_NAME, False, "Layer stack is empty.")

    root_layer = layer_stack[0]
    if not root_layer:
        return Outcome(CHECK_NAME, False, "The first layer in the stack is null.")

    errors: list[str] = []
    seen_ids: set[str] = set()

    if not root_layer.anonymous and not root_layer.defaultPrim:
        errors.append(f"Root layer missing default prim specification: {root_layer.identifier}")

    for index, layer in enumerate(layer_stack):
        if not layer:
            errors.append(f"Broken reference at layer index {index}")
            continue

        layer_id = layer.identifier
        if layer_id in seen_ids:
            errors.append(f"Duplicate layer identifier found: {layer_id}")
        else:
            seen_ids.add(layer_id)

        _check_sublayers(layer, errors)
        _check_root_prims(layer, index, errors)

    logger.debug(f"Layer check inspected {len(layer_stack)} layer(s), {len(errors)} issue(s)")

    if errors:
        return Outcome(
            CHECK_NAME,
            False,
            format_issues("Layer structure validation failed with the following issues:", errors),
        )

    return Outcome(CHECK_NAME, True, "Layer stack and all references are valid.")
