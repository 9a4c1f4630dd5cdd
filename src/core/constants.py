"""Core constants used across hits2mcpl modules.

This module centralizes particle schema defaults and tolerances.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

NEUTRON_PDG_CODE = 2112
DEFAULT_PARTICLE_WEIGHT = 1.0
DEFAULT_HEADER_COMMENT = "Extracting Neutrons from the txt file"
UNIT_DIRECTION_TOLERANCE = 1.0e-5
RECORD_FIELD_COUNT = 7
MCPL_FILE_SUFFIX = ".mcpl"
GZIP_FILE_SUFFIX = ".gz"
MCPL_LIBRARY_NAME = "mcpl"
MCPL_CONFIG_EXECUTABLE = "mcpl-config"
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
TRUE_FLAG_VALUES = ("1", "true", "yes", "on")
FALSE_FLAG_VALUES = ("0", "false", "no", "off")
