"""Conversion orchestration.

This module runs one synchronous pass: open the hit list, open the
container, validate and emit every record in input order, then finalize.
"""

from __future__ import annotations

from collections import Counter
from typing import TextIO

from core.config import ConversionConfig
from core.constants import GZIP_FILE_SUFFIX
from core.logging_config import ensure_logging_configured, get_logger
from core.types import (
    ConversionOptions,
    ConversionSummary,
    DirectedHit,
    RejectionReason,
)
from ingest.record_reader import iter_input_records, open_input
from store.container import ContainerFactory, ContainerLifecycle
from store.mcpl_library import build_mcpl_factory
from store.mcpl_verification import read_container_snapshot, verify_container
from store.record_emitter import RecordEmitter
from transforms.momentum_direction import validate_record

_LOGGER = get_logger(__name__)


class ConversionRunner:
    """Single-use runner for one hit list to container conversion."""

    def __init__(
        self,
        options: ConversionOptions,
        config: ConversionConfig,
        container_factory: ContainerFactory | None = None,
    ) -> None:
        self._options = options
        self._config = config
        self._container_factory = container_factory
        self._lifecycle = ContainerLifecycle()

    def run(self) -> ConversionSummary:
        """Execute the conversion and return its summary.

        Raises:
            InputReadError: If the hit list cannot be opened.
            ContainerError: If the container cannot be created, written, or closed.
            DependencyError: If libmcpl is required but missing.
        """
        with open_input(self._options.input_path) as input_stream:
            self._lifecycle.open(
                self._resolve_factory(),
                self._options.output_path,
                self._options.header_source,
                self._config.header_comment,
            )
            records_read, rejections = self._process_records(input_stream)
            written_path = self._lifecycle.finalize()
        summary = ConversionSummary(
            input_path=self._options.input_path,
            output_path=written_path,
            records_read=records_read,
            records_accepted=self._lifecycle.appended_count,
            rejections=dict(rejections),
            compressed=written_path.name.endswith(GZIP_FILE_SUFFIX),
        )
        if self._options.verify:
            self._verify(summary)
        _log_conversion_completion(summary)
        return summary

    def _resolve_factory(self) -> ContainerFactory:
        if self._container_factory is not None:
            return self._container_factory
        return build_mcpl_factory(self._config.mcpl_library_path, self._config.compress)

    def _process_records(self, input_stream: TextIO) -> tuple[int, Counter[RejectionReason]]:
        emitter = RecordEmitter(self._lifecycle, self._config.pdg_code, self._config.weight)
        rejections: Counter[RejectionReason] = Counter()
        records_read = 0
        for record in iter_input_records(input_stream):
            records_read += 1
            outcome = validate_record(record, self._config.direction_tolerance)
            if isinstance(outcome, DirectedHit):
                emitter.emit(outcome)
            else:
                rejections[outcome.reason] += 1
        return records_read, rejections

    def _verify(self, summary: ConversionSummary) -> None:
        snapshot = read_container_snapshot(summary.output_path)
        verify_container(
            snapshot,
            expected_count=summary.records_accepted,
            expected_source=self._options.header_source,
            expected_comment=self._config.header_comment,
        )


def convert_hits(
    options: ConversionOptions,
    config: ConversionConfig,
    container_factory: ContainerFactory | None = None,
) -> ConversionSummary:
    """Convert a text hit list into a particle container.

    Args:
        options: Conversion request options.
        config: Runtime configuration.
        container_factory: Optional backend factory; libmcpl when omitted.

    Returns:
        Conversion summary.

    Raises:
        InputReadError: If the hit list cannot be opened.
        ContainerError: If container creation, append, or finalize fails.
    """
    ensure_logging_configured()
    runner = ConversionRunner(options, config, container_factory)
    return runner.run()


def _log_conversion_completion(summary: ConversionSummary) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "conversion_completed",
        input_path=str(summary.input_path),
        output_path=str(summary.output_path),
        records_read=summary.records_read,
        records_accepted=summary.records_accepted,
        records_rejected=summary.records_rejected,
        zero_momentum=summary.rejections.get(RejectionReason.ZERO_MOMENTUM, 0),
        non_unit_direction=summary.rejections.get(RejectionReason.NON_UNIT_DIRECTION, 0),
        compressed=summary.compressed,
    )
