"""Shared typed models.

This module defines immutable data models passed between the reader,
validator, emitter, and container layers so interfaces stay explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Union

Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class InputRecord:
    """One parsed hit line before validation.

    Attributes:
        index: Zero-based sequential position in the input.
        position: Hit position (x, y, z).
        momentum: Momentum vector (px, py, pz).
        ekin: Kinetic energy.
    """

    index: int
    position: Vector3
    momentum: Vector3
    ekin: float


@dataclass(frozen=True)
class DirectedHit:
    """Hit whose momentum was normalized into a unit direction.

    Attributes:
        index: Sequential input position, kept for diagnostics.
        position: Hit position copied verbatim from the input.
        direction: Unit momentum direction.
        ekin: Kinetic energy copied verbatim from the input.
    """

    index: int
    position: Vector3
    direction: Vector3
    ekin: float


@dataclass(frozen=True)
class ValidatedParticle:
    """Particle in the container schema.

    Attributes:
        position: Particle position.
        direction: Unit momentum direction.
        ekin: Kinetic energy.
        pdgcode: PDG Monte Carlo particle number.
        weight: Statistical weight.
    """

    position: Vector3
    direction: Vector3
    ekin: float
    pdgcode: int
    weight: float


class RejectionReason(str, Enum):
    """Why a record was left out of the container."""

    ZERO_MOMENTUM = "zero_momentum"
    NON_UNIT_DIRECTION = "non_unit_direction"


@dataclass(frozen=True)
class RecordRejection:
    """Non-fatal rejection of one input record.

    Attributes:
        index: Sequential input position of the rejected record.
        reason: Rejection kind.
    """

    index: int
    reason: RejectionReason


ValidationOutcome = Union[DirectedHit, RecordRejection]


@dataclass(frozen=True)
class ConversionOptions:
    """Conversion request options.

    Attributes:
        input_path: Text hit list to read.
        output_path: Requested MCPL container path.
        source_name: Header source label; defaults to the output path.
        verify: Reread the finished container and check it.
    """

    input_path: Path
    output_path: Path
    source_name: str | None = None
    verify: bool = False

    @property
    def header_source(self) -> str:
        """Source label written to the container header."""
        return self.source_name if self.source_name is not None else str(self.output_path)


@dataclass(frozen=True)
class ConversionSummary:
    """Result of a full conversion pass.

    Attributes:
        input_path: Text hit list that was read.
        output_path: Container file as written, including any ``.gz`` suffix.
        records_read: Number of records parsed from the input.
        records_accepted: Number of particles appended to the container.
        rejections: Rejected record counts keyed by reason.
        compressed: Whether the container was gzipped at finalize.
    """

    input_path: Path
    output_path: Path
    records_read: int
    records_accepted: int
    rejections: Mapping[RejectionReason, int] = field(default_factory=dict)
    compressed: bool = False

    @property
    def records_rejected(self) -> int:
        """Total number of rejected records."""
        return sum(self.rejections.values())
