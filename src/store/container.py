"""Particle container lifecycle.

This module wraps a particle container backend in a strict
``UNOPENED -> OPEN -> FINALIZED`` state machine so headers are written
before any particle and the container is closed exactly once.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Protocol

from core.errors import ContainerStateError
from core.logging_config import get_logger
from core.types import ValidatedParticle

_LOGGER = get_logger(__name__)


class ParticleContainer(Protocol):
    """Backend contract consumed by the lifecycle."""

    def set_header_source(self, source_name: str) -> None:
        """Set the header source label."""

    def add_header_comment(self, comment: str) -> None:
        """Append one free-text header comment."""

    def append(self, particle: ValidatedParticle) -> None:
        """Append one particle in call order."""

    def finalize(self) -> Path:
        """Flush and close the container, returning the path written."""


ContainerFactory = Callable[[Path], ParticleContainer]


class ContainerState(str, Enum):
    """Lifecycle states of an output container."""

    UNOPENED = "unopened"
    OPEN = "open"
    FINALIZED = "finalized"


class ContainerLifecycle:
    """Owns one output container from creation to finalize."""

    def __init__(self) -> None:
        self._state = ContainerState.UNOPENED
        self._container: ParticleContainer | None = None
        self._output_path: Path | None = None
        self._appended_count = 0

    @property
    def state(self) -> ContainerState:
        return self._state

    @property
    def appended_count(self) -> int:
        return self._appended_count

    def open(
        self,
        factory: ContainerFactory,
        output_path: Path,
        source_name: str,
        comment: str,
    ) -> None:
        """Create the container and write its header.

        Args:
            factory: Backend constructor taking the output path.
            output_path: Requested container path.
            source_name: Header source label.
            comment: The single header comment.

        Raises:
            ContainerStateError: If the container was already opened.
            ContainerError: If the backend cannot be created.
        """
        if self._state is not ContainerState.UNOPENED:
            raise ContainerStateError(
                f"Cannot open container at {output_path}: lifecycle is {self._state.value}."
            )
        container = factory(output_path)
        container.set_header_source(source_name)
        container.add_header_comment(comment)
        self._container = container
        self._output_path = output_path
        self._state = ContainerState.OPEN
        _LOGGER.info(
            "container_opened",
            output_path=str(output_path),
            source_name=source_name,
            comment=comment,
        )

    def append(self, particle: ValidatedParticle) -> None:
        """Append one particle to the open container.

        Raises:
            ContainerStateError: If the container is not open.
            ContainerError: If the backend append fails.
        """
        container = self._require_open("append a particle")
        container.append(particle)
        self._appended_count += 1

    def finalize(self) -> Path:
        """Close the container exactly once.

        Returns:
            Path of the container file as written.

        Raises:
            ContainerStateError: If the container is not open.
            ContainerError: If the backend close fails.
        """
        container = self._require_open("finalize")
        self._state = ContainerState.FINALIZED
        written_path = container.finalize()
        _LOGGER.info(
            "container_finalized",
            output_path=str(written_path),
            particle_count=self._appended_count,
        )
        return written_path

    def _require_open(self, action: str) -> ParticleContainer:
        if self._state is not ContainerState.OPEN or self._container is None:
            raise ContainerStateError(
                f"Cannot {action} for {self._output_path}: "
                f"container lifecycle is {self._state.value}, expected open."
            )
        return self._container
