"""MCPL output file backend.

This module binds the MCPL C library through ctypes and exposes an
output file that satisfies the particle container contract. The binary
layout, header encoding, and gzip step all stay inside libmcpl.
"""

from __future__ import annotations

import ctypes
import ctypes.util
from functools import lru_cache
from pathlib import Path
import shutil
import subprocess
import sys

from core.constants import (
    GZIP_FILE_SUFFIX,
    MCPL_CONFIG_EXECUTABLE,
    MCPL_FILE_SUFFIX,
    MCPL_LIBRARY_NAME,
)
from core.errors import ContainerError, ContainerStateError, DependencyError
from core.logging_config import get_logger
from core.types import ValidatedParticle
from store.container import ContainerFactory

_LOGGER = get_logger(__name__)


class _McplOutfile(ctypes.Structure):
    """Opaque ``mcpl_outfile_t`` handle passed by value."""

    _fields_ = [("internal", ctypes.c_void_p)]


class _McplParticle(ctypes.Structure):
    """Field layout of ``mcpl_particle_t``."""

    _fields_ = [
        ("ekin", ctypes.c_double),
        ("polarisation", ctypes.c_double * 3),
        ("position", ctypes.c_double * 3),
        ("direction", ctypes.c_double * 3),
        ("time", ctypes.c_double),
        ("weight", ctypes.c_double),
        ("pdgcode", ctypes.c_int32),
        ("userflags", ctypes.c_uint32),
    ]


def find_mcpl_library(explicit_path: Path | None = None) -> Path:
    """Locate the libmcpl shared library.

    Args:
        explicit_path: Optional configured library path, checked first.

    Returns:
        Path to the shared library.

    Raises:
        DependencyError: If no library can be found.
    """
    if explicit_path is not None:
        if not explicit_path.is_file():
            raise DependencyError(
                f"Configured MCPL library {explicit_path} does not exist. "
                "Fix HITS2MCPL_LIBMCPL or unset it to auto-detect libmcpl."
            )
        return explicit_path
    config_path = _library_from_mcpl_config()
    if config_path is not None:
        return config_path
    found_name = ctypes.util.find_library(MCPL_LIBRARY_NAME)
    if found_name:
        return Path(found_name)
    raise DependencyError(
        "Writing MCPL files requires libmcpl, but it was not found. "
        "Install the mcpl package (pip install mcpl) or set HITS2MCPL_LIBMCPL."
    )


def _library_from_mcpl_config() -> Path | None:
    """Ask ``mcpl-config`` for the installed library path."""
    executable = _find_mcpl_config()
    if executable is None:
        return None
    try:
        completed = subprocess.run(
            [executable, "--show", "libpath"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as error:
        _LOGGER.warning("mcpl_config_failed", executable=executable, error=str(error))
        return None
    library_path = Path(completed.stdout.strip())
    return library_path if library_path.is_file() else None


def _find_mcpl_config() -> str | None:
    """Find ``mcpl-config`` on PATH or beside the running interpreter."""
    on_path = shutil.which(MCPL_CONFIG_EXECUTABLE)
    if on_path is not None:
        return on_path
    # Virtualenv scripts live beside the interpreter even when bin/ is not on PATH.
    beside_interpreter = Path(sys.executable).parent / MCPL_CONFIG_EXECUTABLE
    return str(beside_interpreter) if beside_interpreter.is_file() else None


@lru_cache(maxsize=None)
def load_mcpl_library(library_path: Path) -> ctypes.CDLL:
    """Load libmcpl and declare the output-side function signatures.

    Args:
        library_path: Shared library path.

    Returns:
        Loaded library handle.

    Raises:
        DependencyError: If the library cannot be loaded.
    """
    try:
        library = ctypes.CDLL(str(library_path))
    except OSError as error:
        raise DependencyError(
            f"Failed to load MCPL library at {library_path}: {error}."
        ) from error
    library.mcpl_create_outfile.argtypes = [ctypes.c_char_p]
    library.mcpl_create_outfile.restype = _McplOutfile
    library.mcpl_hdr_set_srcname.argtypes = [_McplOutfile, ctypes.c_char_p]
    library.mcpl_hdr_set_srcname.restype = None
    library.mcpl_hdr_add_comment.argtypes = [_McplOutfile, ctypes.c_char_p]
    library.mcpl_hdr_add_comment.restype = None
    library.mcpl_add_particle.argtypes = [_McplOutfile, ctypes.POINTER(_McplParticle)]
    library.mcpl_add_particle.restype = None
    library.mcpl_close_outfile.argtypes = [_McplOutfile]
    library.mcpl_close_outfile.restype = None
    library.mcpl_closeandgzip_outfile.argtypes = [_McplOutfile]
    library.mcpl_closeandgzip_outfile.restype = ctypes.c_int
    return library


class McplOutputFile:
    """MCPL container backed by libmcpl."""

    def __init__(self, library: ctypes.CDLL, output_path: Path, compress: bool = True) -> None:
        """Create the MCPL output file.

        Args:
            library: Handle returned by ``load_mcpl_library``.
            output_path: Requested output path; libmcpl adds ``.mcpl`` if missing.
            compress: Gzip the file when it is finalized.

        Raises:
            ContainerError: If the output directory does not exist.
        """
        parent_dir = output_path.expanduser().resolve().parent
        if not parent_dir.is_dir():
            raise ContainerError(
                f"Failed to create MCPL file {output_path}: directory {parent_dir} "
                "does not exist. Create it and retry."
            )
        self._library = library
        self._compress = compress
        self._mcpl_path = mcpl_file_path(output_path)
        self._handle: _McplOutfile | None = library.mcpl_create_outfile(_encode(output_path))

    def set_header_source(self, source_name: str) -> None:
        self._library.mcpl_hdr_set_srcname(self._require_handle(), source_name.encode("utf-8"))

    def add_header_comment(self, comment: str) -> None:
        self._library.mcpl_hdr_add_comment(self._require_handle(), comment.encode("utf-8"))

    def append(self, particle: ValidatedParticle) -> None:
        record = _McplParticle()
        record.ekin = particle.ekin
        record.position[:] = particle.position
        record.direction[:] = particle.direction
        record.weight = particle.weight
        record.pdgcode = particle.pdgcode
        self._library.mcpl_add_particle(self._require_handle(), ctypes.byref(record))

    def finalize(self) -> Path:
        """Close the file, gzipping it when enabled.

        Returns:
            Path of the file left on disk.
        """
        handle = self._require_handle()
        self._handle = None
        if not self._compress:
            self._library.mcpl_close_outfile(handle)
            return self._mcpl_path
        if self._library.mcpl_closeandgzip_outfile(handle):
            return self._mcpl_path.with_name(self._mcpl_path.name + GZIP_FILE_SUFFIX)
        _LOGGER.warning("mcpl_gzip_skipped", output_path=str(self._mcpl_path))
        return self._mcpl_path

    def _require_handle(self) -> _McplOutfile:
        if self._handle is None:
            raise ContainerStateError(f"MCPL file {self._mcpl_path} is already closed.")
        return self._handle


def mcpl_file_path(output_path: Path) -> Path:
    """Return the uncompressed path libmcpl writes for a requested path."""
    if output_path.name.endswith(MCPL_FILE_SUFFIX):
        return output_path
    return output_path.with_name(output_path.name + MCPL_FILE_SUFFIX)


def build_mcpl_factory(
    library_path: Path | None = None,
    compress: bool = True,
) -> ContainerFactory:
    """Build a container factory writing MCPL files.

    Args:
        library_path: Optional explicit libmcpl path.
        compress: Gzip output at finalize.

    Returns:
        Callable creating an ``McplOutputFile`` for a path.

    Raises:
        DependencyError: If libmcpl cannot be found or loaded.
    """
    library = load_mcpl_library(find_mcpl_library(library_path))

    def _create(output_path: Path) -> McplOutputFile:
        return McplOutputFile(library, output_path, compress=compress)

    return _create


def _encode(path: Path) -> bytes:
    return str(path).encode("utf-8")
