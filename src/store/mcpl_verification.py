"""Post-write MCPL container checks.

This module rereads a finished container with the ``mcpl`` reader and
confirms that its header and particle count match the conversion.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.errors import ContainerError, DependencyError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ContainerSnapshot:
    """Header facts read back from a container.

    Attributes:
        path: Container file that was read.
        particle_count: Number of particles stored.
        source_name: Header source label.
        comments: Header comments in order.
    """

    path: Path
    particle_count: int
    source_name: str
    comments: tuple[str, ...]


def read_container_snapshot(container_path: Path) -> ContainerSnapshot:
    """Read header facts from an MCPL file.

    Args:
        container_path: ``.mcpl`` or ``.mcpl.gz`` file.

    Returns:
        Snapshot of the header.

    Raises:
        DependencyError: If the mcpl reader is not installed.
        ContainerError: If the file cannot be read as MCPL.
    """
    try:
        import mcpl
    except ImportError as error:
        raise DependencyError(
            "Container verification requires the mcpl Python package. "
            "Install mcpl or run without --verify."
        ) from error
    try:
        with mcpl.MCPLFile(str(container_path)) as mcpl_file:
            return ContainerSnapshot(
                path=container_path,
                particle_count=int(mcpl_file.nparticles),
                source_name=str(mcpl_file.sourcename),
                comments=tuple(str(comment) for comment in mcpl_file.comments),
            )
    except (OSError, mcpl.MCPLError) as error:
        raise ContainerError(
            f"Failed to read MCPL file {container_path}: {error}."
        ) from error


def verify_container(
    snapshot: ContainerSnapshot,
    expected_count: int,
    expected_source: str,
    expected_comment: str,
) -> None:
    """Check a container snapshot against the conversion that wrote it.

    Raises:
        ContainerError: If any header fact or the particle count differs.
    """
    problems: list[str] = []
    if snapshot.particle_count != expected_count:
        problems.append(f"particle count {snapshot.particle_count} != {expected_count}")
    if snapshot.source_name != expected_source:
        problems.append(f"source name '{snapshot.source_name}' != '{expected_source}'")
    if snapshot.comments != (expected_comment,):
        problems.append(f"comments {list(snapshot.comments)} != ['{expected_comment}']")
    if problems:
        raise ContainerError(
            f"Verification failed for {snapshot.path}: " + "; ".join(problems) + "."
        )
    _LOGGER.info(
        "container_verified",
        output_path=str(snapshot.path),
        particle_count=snapshot.particle_count,
    )
