# Geometry check
#
# Walks every prim of the composed stage once and validates Xform and Mesh prims:
# - Xform: every ordered xformOp must be backed by an attribute
# - Mesh: extent must exist, be readable and not collapse to a point;
#   authored points must be readable
# Invalid prims are recorded and traversal continues.
# A stage without geometry passes: geometry is optional.

from __future__ import annotations

import logging
from typing import Any

from pxr import Tf, UsdGeom

from ..core.types import Outcome
from ..utils.usd_helpers import format_issues, prim_path

logger = logging.getLogger(__name__)

CHECK_NAME = "Validate Geometry"


def _check_xform(prim: Any, errors: list[str]) -> None:
    xformable = UsdGeom.Xform(prim)
    for op in xformable.GetOrderedXformOps():
        if not op.GetAttr():
            errors.append(f"Invalid transform operation found at: {prim_path(prim)}")


def _check_mesh(prim: Any, errors: list[str]) -> None:
    path = prim_path(prim)
    mesh = UsdGeom.Mesh(prim)

    extent_attr = mesh.GetExtentAttr()
    if not extent_attr:
        errors.append(f"Extent missing for Mesh at path: {path}")
    else:
        try:
            extent = extent_attr.Get()
        except Tf.ErrorException as ex:
            logger.debug(f"Reading extent at {path} failed: {ex}")
            extent = None
        if extent is None:
            errors.append(f"Invalid extent bounds at: {path}")
        elif len(extent) == 2 and extent[0] == extent[1]:
            errors.append(f"Degenerate geometry found at: {path}")

    points_attr = mesh.GetPointsAttr()
    if points_attr:
        try:
            points = points_attr.Get()
        except Tf.ErrorException as ex:
            logger.debug(f"Reading points at {path} failed: {ex}")
            points = None
        if points is None:
            errors.append(f"Invalid point data at: {path}")


def validate_geometry(stage: Any) -> Outcome:
    """
    Validate the presence and correctness of geometry prims on `stage`.

    Returns a passing Outcome when no Xform/Mesh prim exists, a failing Outcome
    listing every issue found, or a passing Outcome when all geometry is valid.
    """
    if stage is None:
        return Outcome(CHECK_NAME, False, "Invalid stage reference.")

    root = stage.GetPseudoRoot()
    if not root:
        return Outcome(CHECK_NAME, False, "No root prim found in the scene.")

    found_geometry = False
    errors: list[str] = []
    visited = 0

    for prim in stage.Traverse():
        visited += 1
        if not prim.IsValid():
            errors.append(f"Encountered an invalid prim in the scene: {prim_path(prim)}")
            continue

        is_xform = prim.IsA(UsdGeom.Xform)
        is_mesh = prim.IsA(UsdGeom.Mesh)
        if not (is_xform or is_mesh):
            continue

        found_geometry = True
        if is_xform:
            _check_xform(prim, errors)
        if is_mesh:
            _check_mesh(prim, errors)

    logger.debug(f"Geometry check visited {visited} prims, {len(errors)} issue(s)")

    if not found_geometry:
        return Outcome(CHECK_NAME, True, "No geometry found in the scene, but that's not required.")

    if errors:
        return Outcome(
            CHECK_NAME,
            False,
            format_issues("Geometry validation failed with the following issues:", errors),
        )

    return Outcome(CHECK_NAME, True, "All geometry prims are valid with proper transforms and bounds.")
