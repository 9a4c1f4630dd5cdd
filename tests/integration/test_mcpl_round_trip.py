"""Integration tests writing real MCPL files through libmcpl."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import ConversionConfig
from core.errors import DependencyError
from core.types import ConversionOptions
from ingest.pipeline import convert_hits
from store.mcpl_library import find_mcpl_library
from tests.fixture_paths import hit_list_path

mcpl = pytest.importorskip("mcpl")


@pytest.fixture(scope="module")
def library_path() -> Path:
    """Locate libmcpl or skip the module."""
    try:
        return find_mcpl_library()
    except DependencyError as error:
        pytest.skip(str(error))


@pytest.mark.parametrize("compress", [True, False])
def test_conversion_writes_readable_mcpl_file(
    tmp_path: Path, library_path: Path, compress: bool
) -> None:
    """Written files should reread with the header and particles intact."""
    config = ConversionConfig(mcpl_library_path=library_path, compress=compress)
    options = ConversionOptions(
        input_path=hit_list_path("mixed_hits.txt"),
        output_path=tmp_path / "hits.mcpl",
        verify=True,
    )

    summary = convert_hits(options, config)

    with mcpl.MCPLFile(str(summary.output_path)) as mcpl_file:
        particles = list(mcpl_file.particles)
    assert summary.output_path.name == ("hits.mcpl.gz" if compress else "hits.mcpl")
    assert [particle.pdgcode for particle in particles] == [2112, 2112, 2112]
    assert [particle.ekin for particle in particles] == pytest.approx([5.0, 1.0, 0.025])
    assert particles[1].direction == pytest.approx((0.6, 0.8, 0.0), abs=1e-6)
