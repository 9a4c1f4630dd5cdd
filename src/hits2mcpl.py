"""Public SDK surface for hits2mcpl.

This module provides a stable import path for library users.
It re-exports the conversion entry point and typed option models.
"""

from __future__ import annotations

from core.config import ConversionConfig
from core.errors import (
    ConfigError,
    ContainerError,
    ContainerStateError,
    DependencyError,
    Hits2McplError,
    InputReadError,
)
from core.types import (
    ConversionOptions,
    ConversionSummary,
    DirectedHit,
    InputRecord,
    RecordRejection,
    RejectionReason,
    ValidatedParticle,
)
from ingest.pipeline import convert_hits
from ingest.record_reader import iter_input_records
from store.container import ContainerLifecycle, ParticleContainer
from transforms.momentum_direction import validate_record

__all__ = [
    "ConfigError",
    "ContainerError",
    "ContainerLifecycle",
    "ContainerStateError",
    "ConversionConfig",
    "ConversionOptions",
    "ConversionSummary",
    "DependencyError",
    "DirectedHit",
    "Hits2McplError",
    "InputReadError",
    "InputRecord",
    "ParticleContainer",
    "RecordRejection",
    "RejectionReason",
    "ValidatedParticle",
    "convert_hits",
    "iter_input_records",
    "validate_record",
]
