"""Momentum direction validation.

This module turns a hit's momentum vector into a unit direction and
rejects records that cannot yield one: zero momentum, or a normalized
vector whose squared length misses 1 by more than the tolerance.
"""

from __future__ import annotations

import math

from core.constants import UNIT_DIRECTION_TOLERANCE
from core.logging_config import get_logger
from core.types import (
    DirectedHit,
    InputRecord,
    RecordRejection,
    RejectionReason,
    ValidationOutcome,
)

_LOGGER = get_logger(__name__)


def validate_record(
    record: InputRecord,
    tolerance: float = UNIT_DIRECTION_TOLERANCE,
) -> ValidationOutcome:
    """Validate one record and derive its unit direction.

    Args:
        record: Parsed input record.
        tolerance: Allowed ``|dirsq - 1|`` for the normalized direction.

    Returns:
        A directed hit on success, else a record rejection.
    """
    px, py, pz = record.momentum
    length = math.sqrt(px * px + py * py + pz * pz)
    if length == 0.0:
        return _reject(record.index, RejectionReason.ZERO_MOMENTUM)
    direction = (px / length, py / length, pz / length)
    dirsq = direction_norm_squared(direction)
    _LOGGER.debug("direction_checked", record_index=record.index, dirsq=dirsq)
    # NaN fails this comparison, so non-finite momenta are rejected here.
    if not abs(dirsq - 1.0) <= tolerance:
        return _reject(record.index, RejectionReason.NON_UNIT_DIRECTION)
    return DirectedHit(
        index=record.index,
        position=record.position,
        direction=direction,
        ekin=record.ekin,
    )


def direction_norm_squared(direction: tuple[float, float, float]) -> float:
    """Return the squared length of a 3-vector."""
    dx, dy, dz = direction
    return dx * dx + dy * dy + dz * dz


def _reject(index: int, reason: RejectionReason) -> RecordRejection:
    """Build and log a record rejection."""
    _LOGGER.warning("record_skipped", record_index=index, reason=reason.value)
    return RecordRejection(index=index, reason=reason)
