# usdcheck: structural validation for layered USD scenes
#
# Checks a composed USD stage for geometry integrity, shader wiring,
# layer-stack resolution, and variant-set consistency, then prints a
# pass/fail report with a summary.
#
# License: MIT

import logging

__version__ = "0.1.0"

# Global logger for the package
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)

# Diagnostics go to stderr; stdout is reserved for the report itself
handler = logging.StreamHandler()
handler.setLevel(logging.DEBUG)
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
