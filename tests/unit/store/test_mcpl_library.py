"""Unit tests for the libmcpl-backed output file."""

from __future__ import annotations

from pathlib import Path
import subprocess

import pytest

from core.errors import ContainerError, ContainerStateError, DependencyError
from core.types import ValidatedParticle
from store.mcpl_library import McplOutputFile, find_mcpl_library, mcpl_file_path


class _FakeLibrary:
    """Stands in for a loaded libmcpl, recording calls."""

    def __init__(self, gzip_result: int = 1) -> None:
        self.calls: list[tuple[str, object]] = []
        self.particles: list[dict[str, object]] = []
        self._gzip_result = gzip_result

    def mcpl_create_outfile(self, filename: bytes) -> str:
        self.calls.append(("create", filename))
        return "handle"

    def mcpl_hdr_set_srcname(self, handle: str, name: bytes) -> None:
        self.calls.append(("srcname", name))

    def mcpl_hdr_add_comment(self, handle: str, comment: bytes) -> None:
        self.calls.append(("comment", comment))

    def mcpl_add_particle(self, handle: str, particle_ref) -> None:
        record = particle_ref._obj
        self.particles.append(
            {
                "ekin": record.ekin,
                "position": tuple(record.position),
                "direction": tuple(record.direction),
                "weight": record.weight,
                "pdgcode": record.pdgcode,
                "time": record.time,
            }
        )

    def mcpl_close_outfile(self, handle: str) -> None:
        self.calls.append(("close", handle))

    def mcpl_closeandgzip_outfile(self, handle: str) -> int:
        self.calls.append(("closeandgzip", handle))
        return self._gzip_result


def test_output_file_writes_header_and_particle_fields(tmp_path: Path) -> None:
    """Header strings and particle fields should reach libmcpl unchanged."""
    library = _FakeLibrary()
    output_file = McplOutputFile(library, tmp_path / "hits.mcpl")

    output_file.set_header_source("hits.mcpl")
    output_file.add_header_comment("neutrons")
    output_file.append(
        ValidatedParticle(
            position=(1.0, 2.0, 3.0),
            direction=(0.6, 0.8, 0.0),
            ekin=5.0,
            pdgcode=2112,
            weight=1.0,
        )
    )

    assert library.calls[1:] == [("srcname", b"hits.mcpl"), ("comment", b"neutrons")]
    assert library.particles == [
        {
            "ekin": 5.0,
            "position": (1.0, 2.0, 3.0),
            "direction": (0.6, 0.8, 0.0),
            "weight": 1.0,
            "pdgcode": 2112,
            "time": 0.0,
        }
    ]


def test_finalize_gzips_by_default(tmp_path: Path) -> None:
    """Finalize should gzip and report the .gz path."""
    library = _FakeLibrary()
    output_file = McplOutputFile(library, tmp_path / "hits.mcpl")

    written_path = output_file.finalize()

    assert written_path == tmp_path / "hits.mcpl.gz" and library.calls[-1][0] == "closeandgzip"


def test_finalize_without_compression_closes_plain_file(tmp_path: Path) -> None:
    """Disabled compression should use the plain close call."""
    library = _FakeLibrary()
    output_file = McplOutputFile(library, tmp_path / "hits", compress=False)

    written_path = output_file.finalize()

    assert written_path == tmp_path / "hits.mcpl" and library.calls[-1][0] == "close"


def test_finalize_reports_plain_path_when_gzip_fails(tmp_path: Path) -> None:
    """A failed gzip leaves the uncompressed file in place."""
    library = _FakeLibrary(gzip_result=0)
    output_file = McplOutputFile(library, tmp_path / "hits.mcpl")

    assert output_file.finalize() == tmp_path / "hits.mcpl"


def test_closed_file_rejects_further_calls(tmp_path: Path) -> None:
    """No call may reach libmcpl after the file is closed."""
    library = _FakeLibrary()
    output_file = McplOutputFile(library, tmp_path / "hits.mcpl")
    output_file.finalize()

    with pytest.raises(ContainerStateError):
        output_file.finalize()

    assert [name for name, _ in library.calls].count("closeandgzip") == 1


def test_output_file_requires_existing_directory(tmp_path: Path) -> None:
    """Missing output directories should fail before libmcpl is called."""
    library = _FakeLibrary()

    with pytest.raises(ContainerError):
        McplOutputFile(library, tmp_path / "missing" / "hits.mcpl")

    assert library.calls == []


def test_mcpl_file_path_appends_suffix() -> None:
    """libmcpl writes .mcpl files; the suffix is added when missing."""
    assert (mcpl_file_path(Path("a/hits")), mcpl_file_path(Path("a/hits.mcpl"))) == (
        Path("a/hits.mcpl"),
        Path("a/hits.mcpl"),
    )


def test_find_mcpl_library_prefers_explicit_path(tmp_path: Path) -> None:
    """A configured library path should be used as-is."""
    library_path = tmp_path / "libmcpl.so"
    library_path.write_bytes(b"")

    assert find_mcpl_library(library_path) == library_path


def test_find_mcpl_library_rejects_missing_explicit_path(tmp_path: Path) -> None:
    """A configured path that does not exist is an error, not a fallback."""
    with pytest.raises(DependencyError):
        find_mcpl_library(tmp_path / "libmcpl.so")


def test_find_mcpl_library_uses_mcpl_config(monkeypatch, tmp_path: Path) -> None:
    """mcpl-config output should locate the installed library."""
    library_path = tmp_path / "libmcpl.so"
    library_path.write_bytes(b"")
    monkeypatch.setattr("store.mcpl_library.shutil.which", lambda name: "/usr/bin/mcpl-config")
    monkeypatch.setattr(
        "store.mcpl_library.subprocess.run",
        lambda *args, **kwargs: subprocess.CompletedProcess(args, 0, f"{library_path}\n", ""),
    )

    assert find_mcpl_library() == library_path


def test_find_mcpl_library_raises_when_nothing_found(monkeypatch, tmp_path: Path) -> None:
    """Without mcpl-config or a system library, discovery should fail clearly."""
    monkeypatch.setattr("store.mcpl_library.shutil.which", lambda name: None)
    monkeypatch.setattr("store.mcpl_library.sys.executable", str(tmp_path / "python"))
    monkeypatch.setattr("store.mcpl_library.ctypes.util.find_library", lambda name: None)

    with pytest.raises(DependencyError):
        find_mcpl_library()


def test_find_mcpl_library_uses_mcpl_config_beside_interpreter(
    monkeypatch, tmp_path: Path
) -> None:
    """mcpl-config in the interpreter's bin directory is found without PATH."""
    bin_dir = tmp_path / "venv" / "bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "mcpl-config").write_text("", encoding="utf-8")
    library_path = tmp_path / "libmcpl.so"
    library_path.write_bytes(b"")
    invoked: list[list[str]] = []

    def _run(command, **kwargs):
        invoked.append(command)
        return subprocess.CompletedProcess(command, 0, f"{library_path}\n", "")

    monkeypatch.setattr("store.mcpl_library.shutil.which", lambda name: None)
    monkeypatch.setattr("store.mcpl_library.sys.executable", str(bin_dir / "python"))
    monkeypatch.setattr("store.mcpl_library.subprocess.run", _run)

    assert find_mcpl_library() == library_path
    assert invoked == [[str(bin_dir / "mcpl-config"), "--show", "libpath"]]
