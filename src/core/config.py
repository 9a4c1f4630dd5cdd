"""Runtime configuration model for hits2mcpl.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from pathlib import Path

from core.constants import (
    DEFAULT_HEADER_COMMENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PARTICLE_WEIGHT,
    FALSE_FLAG_VALUES,
    NEUTRON_PDG_CODE,
    SUPPORTED_LOG_LEVELS,
    TRUE_FLAG_VALUES,
    UNIT_DIRECTION_TOLERANCE,
)
from core.errors import ConfigError


@dataclass(frozen=True)
class ConversionConfig:
    """Validated runtime configuration.

    Attributes:
        pdg_code: Particle-type code assigned to every emitted particle.
        weight: Statistical weight assigned to every emitted particle.
        header_comment: Free-text comment written to the container header.
        compress: Gzip the container when it is finalized.
        direction_tolerance: Allowed deviation of ``|direction|**2`` from 1.
        mcpl_library_path: Optional explicit path to the libmcpl shared library.
        log_level: Minimum level for structured log output.
    """

    pdg_code: int = NEUTRON_PDG_CODE
    weight: float = DEFAULT_PARTICLE_WEIGHT
    header_comment: str = DEFAULT_HEADER_COMMENT
    compress: bool = True
    direction_tolerance: float = UNIT_DIRECTION_TOLERANCE
    mcpl_library_path: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ConversionConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ConfigError: If environment values are invalid.
        """
        library_value = os.getenv("HITS2MCPL_LIBMCPL")
        return cls(
            pdg_code=parse_pdg_code(os.getenv("HITS2MCPL_PDGCODE", str(NEUTRON_PDG_CODE))),
            weight=parse_weight(os.getenv("HITS2MCPL_WEIGHT", str(DEFAULT_PARTICLE_WEIGHT))),
            header_comment=os.getenv("HITS2MCPL_COMMENT", DEFAULT_HEADER_COMMENT),
            compress=_parse_flag("HITS2MCPL_GZIP", os.getenv("HITS2MCPL_GZIP", "true")),
            direction_tolerance=_parse_tolerance(
                os.getenv("HITS2MCPL_TOLERANCE", str(UNIT_DIRECTION_TOLERANCE))
            ),
            mcpl_library_path=Path(library_value).expanduser() if library_value else None,
            log_level=_parse_log_level(os.getenv("HITS2MCPL_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )


def parse_pdg_code(raw_value: str) -> int:
    """Parse a particle-type code.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Parsed integer code.

    Raises:
        ConfigError: If value is not an integer or is zero.
    """
    try:
        pdg_code = int(raw_value)
    except ValueError as error:
        raise ConfigError(
            f"Invalid particle code: expected integer, got '{raw_value}'. "
            "Use a PDG Monte Carlo number such as 2112 for neutrons."
        ) from error
    if pdg_code == 0:
        raise ConfigError(
            "Invalid particle code: 0 is not a PDG Monte Carlo number. "
            "Use a value such as 2112 for neutrons."
        )
    return pdg_code


def parse_weight(raw_value: str) -> float:
    """Parse a statistical weight.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Parsed finite, non-negative weight.

    Raises:
        ConfigError: If value is not a finite non-negative number.
    """
    try:
        weight = float(raw_value)
    except ValueError as error:
        raise ConfigError(
            f"Invalid particle weight: expected number, got '{raw_value}'."
        ) from error
    if not math.isfinite(weight) or weight < 0.0:
        raise ConfigError(
            f"Invalid particle weight {raw_value}: expected a finite value >= 0."
        )
    return weight


def _parse_tolerance(raw_value: str) -> float:
    """Parse the unit-direction tolerance."""
    try:
        tolerance = float(raw_value)
    except ValueError as error:
        raise ConfigError(
            f"Invalid HITS2MCPL_TOLERANCE value: expected number, got '{raw_value}'."
        ) from error
    if not math.isfinite(tolerance) or tolerance <= 0.0:
        raise ConfigError(
            f"Invalid HITS2MCPL_TOLERANCE value {raw_value}: expected a positive finite number."
        )
    return tolerance


def _parse_flag(name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag."""
    normalized = raw_value.strip().lower()
    if normalized in TRUE_FLAG_VALUES:
        return True
    if normalized in FALSE_FLAG_VALUES:
        return False
    raise ConfigError(
        f"Invalid {name} value: expected one of "
        f"{TRUE_FLAG_VALUES + FALSE_FLAG_VALUES}, got '{raw_value}'."
    )


def _parse_log_level(raw_value: str) -> str:
    """Parse and normalize the log level name."""
    normalized = raw_value.strip().lower()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise ConfigError(
            f"Invalid HITS2MCPL_LOG_LEVEL value '{raw_value}'. "
            f"Supported levels: {SUPPORTED_LOG_LEVELS}."
        )
    return normalized
