# usdcheck checks: one analyzer per check category.
# Each analyzer takes an opened Usd.Stage and returns an Outcome.

from .geometry import validate_geometry
from .layers import validate_layer_structure
from .shaders import validate_shaders
from .variants import validate_variants

__all__ = [
    "validate_geometry",
    "validate_layer_structure",
    "validate_shaders",
    "validate_variants",
]
