# Helpers around the USD Python bindings (pxr) used by the checks.
#
# Responsibilities:
# - Open stages and layers, turning Tf.ErrorException into None so callers can
#   report a finding instead of crashing
# - Resolve asset paths relative to the layer that authored them
# - Paper over small API differences between USD releases
# - Shared formatting of aggregated issue lists
#
# Public API:
# - open_stage(path) -> Usd.Stage | None
# - open_layer(asset_path, anchor=None) -> Sdf.Layer | None
# - external_asset_paths(layer) -> list[str]
# - listed_items(list_proxy) -> list
# - prim_path(prim) -> str
# - format_issues(header, issues) -> str

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from pxr import Sdf, Tf, Usd

logger = logging.getLogger(__name__)


def open_stage(path: str) -> Optional[Usd.Stage]:
    """Open a USD stage, or return None when the file cannot be opened."""
    if not path:
        return None
    try:
        stage = Usd.Stage.Open(path)
    except Tf.ErrorException as ex:
        logger.debug(f"Usd.Stage.Open failed for {path}: {ex}")
        return None
    return stage or None


def resolve_asset_path(asset_path: str, anchor: Any = None) -> str:
    """Make `asset_path` relative to the layer `anchor`, when one is given."""
    if anchor is None or not asset_path:
        return asset_path
    try:
        return Sdf.ComputeAssetPathRelativeToLayer(anchor, asset_path) or asset_path
    except Tf.ErrorException as ex:
        logger.debug(f"Could not anchor {asset_path} to layer: {ex}")
        return asset_path


def open_layer(asset_path: str, anchor: Any = None) -> Optional[Sdf.Layer]:
    """
    Find or open the layer at `asset_path`, resolved relative to `anchor`.
    Returns None when the layer cannot be found or opened.
    """
    if not asset_path:
        return None
    resolved = resolve_asset_path(asset_path, anchor)
    try:
        layer = Sdf.Layer.FindOrOpen(resolved)
    except Tf.ErrorException as ex:
        logger.debug(f"Sdf.Layer.FindOrOpen failed for {resolved}: {ex}")
        return None
    return layer or None


def external_asset_paths(layer: Any) -> list[str]:
    """Asset paths of every sublayer, reference and payload authored in `layer`."""
    getter = getattr(layer, "GetCompositionAssetDependencies", None)
    if getter is None:
        # USD releases before 21.x only expose the older name
        getter = layer.GetExternalReferences
    return [str(p) for p in getter() if p]


def listed_items(list_proxy: Any) -> list:
    """
    Explicit and added items of a reference or payload list op, in authored order.
    Prepended and appended items count as added.
    """
    if list_proxy is None:
        return []
    items: list = []
    for attr in ("explicitItems", "prependedItems", "addedItems", "appendedItems"):
        for item in getattr(list_proxy, attr, None) or []:
            if item not in items:
                items.append(item)
    return items


def prim_path(prim: Any) -> str:
    return str(prim.GetPath())


def format_issues(header: str, issues: Iterable[str]) -> str:
    lines = [header]
    lines.extend(f"- {issue}" for issue in issues)
    return "\n".join(lines) + "\n"
