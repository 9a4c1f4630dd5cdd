"""Particle record emission.

This module maps directed hits onto the container particle schema,
stamping the configured particle code and weight at emission time.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import DirectedHit, ValidatedParticle
from store.container import ContainerLifecycle

_LOGGER = get_logger(__name__)


class RecordEmitter:
    """Appends particles to an open container in call order."""

    def __init__(self, lifecycle: ContainerLifecycle, pdg_code: int, weight: float) -> None:
        self._lifecycle = lifecycle
        self._pdg_code = pdg_code
        self._weight = weight

    def emit(self, hit: DirectedHit) -> ValidatedParticle:
        """Build the particle for a hit and append it.

        Args:
            hit: Validated hit with unit direction.

        Returns:
            The particle that was appended.

        Raises:
            ContainerError: If the container rejects the append.
        """
        particle = build_particle(hit, self._pdg_code, self._weight)
        self._lifecycle.append(particle)
        _LOGGER.debug("particle_added", record_index=hit.index)
        return particle


def build_particle(hit: DirectedHit, pdg_code: int, weight: float) -> ValidatedParticle:
    """Map a directed hit onto the particle schema."""
    return ValidatedParticle(
        position=hit.position,
        direction=hit.direction,
        ekin=hit.ekin,
        pdgcode=pdg_code,
        weight=weight,
    )
