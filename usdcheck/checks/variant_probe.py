# Variant probe: scoped mutation of a variant selection.
#
# The variant check is the only check allowed to change stage state. Every change
# goes through VariantSelectionGuard:
# - on entry it captures the composed selection and the session layer contents,
#   then points the stage's edit target at the session layer
# - probes author their selections there, never in the root layer or any layer
#   that came from disk
# - on every exit path, including exceptions raised while probing, the session
#   layer contents and the previous edit target are put back
# The session layer is stronger than the root layer stack, so a probe selection
# always wins over the authored one while the guard is active.
#
# The variant set is looked up again from the stage on each use: switching a
# selection recomposes the prim, which can expire handles obtained earlier.

from __future__ import annotations

import logging
from typing import Any, Optional

from pxr import Tf

logger = logging.getLogger(__name__)


def get_variant_set(stage: Any, path: Any, set_name: str) -> Optional[Any]:
    prim = stage.GetPrimAtPath(path)
    if not prim or not prim.IsValid():
        return None
    return prim.GetVariantSets().GetVariantSet(set_name)


class VariantSelectionGuard:
    """
    Context manager isolating variant probes from the layers of a stage.

        with VariantSelectionGuard(stage, prim.GetPath(), "look") as guard:
            probe_variant(stage, prim.GetPath(), "look", "red")
        if not guard.restored:
            ...

    `restored` is True when the session layer was rolled back and the composed
    selection matches `original` again.
    """

    def __init__(self, stage: Any, path: Any, set_name: str) -> None:
        self.stage = stage
        self.path = path
        self.set_name = set_name
        self.original = ""
        self.restored = False
        self._scratch = None
        self._scratch_contents = ""
        self._edit_target = None

    def __enter__(self) -> "VariantSelectionGuard":
        vset = get_variant_set(self.stage, self.path, self.set_name)
        self.original = vset.GetVariantSelection() if vset is not None else ""

        self._scratch = self.stage.GetSessionLayer()
        self._scratch_contents = self._scratch.ExportToString()
        self._edit_target = self.stage.GetEditTarget()
        self.stage.SetEditTarget(self._scratch)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            self.restored = self._restore()
        finally:
            self.stage.SetEditTarget(self._edit_target)
        return False  # never suppress exceptions

    def _restore(self) -> bool:
        try:
            ok = self._scratch.ImportFromString(self._scratch_contents)
        except Tf.ErrorException as ex:
            logger.warning(f"Rolling back session layer after probing '{self.set_name}' at {self.path} failed: {ex}")
            return False
        if not ok:
            logger.warning(f"Session layer rejected its own contents after probing '{self.set_name}' at {self.path}")
            return False

        vset = get_variant_set(self.stage, self.path, self.set_name)
        if vset is None:
            logger.warning(f"Cannot verify variant set '{self.set_name}' at {self.path}: prim is gone")
            return False
        return vset.GetVariantSelection() == self.original


def probe_variant(stage: Any, path: Any, set_name: str, variant_name: str) -> Optional[str]:
    """
    Select `variant_name` in `set_name` on the prim at `path` and check the prim still
    resolves. Returns an issue description, or None when the probe succeeded.
    The selection is authored on the current edit target; call this inside a
    VariantSelectionGuard so it lands in the session layer and is rolled back.
    """
    vset = get_variant_set(stage, path, set_name)
    if vset is None:
        return f"Prim became invalid before setting variant '{variant_name}' in set '{set_name}' at: {path}"

    try:
        applied = vset.SetVariantSelection(variant_name)
    except Tf.ErrorException as ex:
        logger.debug(f"SetVariantSelection({variant_name}) raised at {path}: {ex}")
        applied = False
    if not applied:
        return f"Failed to set variant '{variant_name}' in set '{set_name}' at: {path}"

    variant_prim = stage.GetPrimAtPath(path)
    if not variant_prim or not variant_prim.IsValid():
        return f"Prim became invalid after setting variant '{variant_name}' in set '{set_name}' at: {path}"
    return None
