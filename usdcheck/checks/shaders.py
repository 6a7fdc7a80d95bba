# Shader check
#
# For every UsdShade.Shader prim on the stage:
# - the shader id must be authored and non-empty
# - at least one input must be declared, and every connected input must point
#   at a valid source prim
# - an authored source asset must carry a non-empty path
# - when the parent is a Material, its surface output must not be connected to
#   an unresolved source
# A stage without shaders passes.

from __future__ import annotations

import logging
from typing import Any

from pxr import Tf, UsdShade

from ..core.types import Outcome
from ..utils.usd_helpers import format_issues, prim_path

logger = logging.getLogger(__name__)

CHECK_NAME = "Validate Shaders"


def _has_broken_connection(port: Any) -> bool:
    """True when `port` (an input or output) is connected to a source that does not resolve."""
    try:
        sources, invalid_paths = port.GetConnectedSources()
    except Tf.ErrorException as ex:
        logger.debug(f"Reading connections of {port.GetFullName()} failed: {ex}")
        return True
    if invalid_paths:
        return True
    return any(not info.source.GetPrim().IsValid() for info in sources)


def _source_asset_path(shader: Any) -> str | None:
    """Authored source asset path of `shader`, or None when none is declared."""
    try:
        asset = shader.GetSourceAsset()
    except Tf.ErrorException:
        return None
    if asset is None:
        return None
    return asset.path


def _check_shader(prim: Any, errors: list[str]) -> None:
    path = prim_path(prim)
    shader = UsdShade.Shader(prim)

    if not shader.GetShaderId():
        errors.append(f"Missing or invalid shader ID at: {path}")

    inputs = shader.GetInputs()
    if not inputs:
        errors.append(f"Shader has no input parameters at: {path}")
    else:
        for shader_input in inputs:
            if _has_broken_connection(shader_input):
                errors.append(
                    f"Invalid shader connection at: {shader_input.GetBaseName()} on prim {path}"
                )

    asset_path = _source_asset_path(shader)
    if asset_path is not None and not asset_path:
        errors.append(f"Missing shader source asset path at: {path}")

    parent = prim.GetParent()
    if parent and parent.IsA(UsdShade.Material):
        surface = UsdShade.Material(parent).GetSurfaceOutput()
        if surface and _has_broken_connection(surface):
            errors.append(f"Invalid material binding at: {prim_path(parent)}")


def validate_shaders(stage: Any) -> Outcome:
    """Validate shader definitions, their inputs and their material wiring."""
    if stage is None:
        return Outcome(CHECK_NAME, False, "Invalid stage reference.")

    found_shader = False
    errors: list[str] = []

    for prim in stage.Traverse():
        if not prim.IsValid():
            errors.append(f"Invalid prim encountered during shader validation: {prim_path(prim)}")
            continue
        if not prim.IsA(UsdShade.Shader):
            continue
        found_shader = True
        _check_shader(prim, errors)

    if not found_shader:
        return Outcome(CHECK_NAME, True, "No shaders found in the scene, but that's acceptable.")

    if errors:
        return Outcome(
            CHECK_NAME,
            False,
            format_issues("Shader validation failed with the following issues:", errors),
        )

    return Outcome(CHECK_NAME, True, "All shaders and their connections are valid.")
