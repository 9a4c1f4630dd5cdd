"""Hit list readers for conversion.

This module opens the plain-text hit list and turns its whitespace
separated numbers into typed input records, seven values at a time.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from core.constants import RECORD_FIELD_COUNT
from core.errors import InputReadError
from core.logging_config import get_logger
from core.types import InputRecord

_LOGGER = get_logger(__name__)


def open_input(input_path: Path) -> TextIO:
    """Open the hit list for reading.

    Args:
        input_path: Path to the text hit list.

    Returns:
        Open text stream positioned at the first record. Undecodable
        bytes become escaped characters, so they end the record stream
        as malformed tokens instead of raising.

    Raises:
        InputReadError: If the path is missing, a directory, or unreadable.
    """
    if not input_path.exists():
        raise InputReadError(
            f"Error opening input file: {input_path} does not exist. "
            "Provide an existing text file with one hit per line."
        )
    if input_path.is_dir():
        raise InputReadError(
            f"Error opening input file: {input_path} is a directory. "
            "Provide a text file with one hit per line."
        )
    try:
        return input_path.open("r", encoding="utf-8", errors="surrogateescape")
    except OSError as error:
        raise InputReadError(
            f"Error opening input file: {input_path}: {error}. Check read permissions."
        ) from error


def iter_input_records(lines: Iterable[str]) -> Iterator[InputRecord]:
    """Yield input records from whitespace-separated numeric text.

    Values are consumed as one token stream, so a record may wrap lines.
    The sequence ends quietly at end of input, at the first token that is
    not a number, or when fewer than seven values remain.

    Args:
        lines: Text lines, typically an open file.

    Yields:
        Records in input order with zero-based indexes.
    """
    pending: deque[float] = deque()
    index = 0
    for line_number, line in enumerate(lines, 1):
        for token in line.split():
            value = _parse_token(token)
            if value is None:
                _log_truncation(index, len(pending), line_number, token)
                return
            pending.append(value)
            if len(pending) == RECORD_FIELD_COUNT:
                yield _build_record(index, pending)
                pending.clear()
                index += 1
    if pending:
        _log_truncation(index, len(pending), None, None)


def _parse_token(token: str) -> float | None:
    """Parse one numeric token, returning None when it is malformed."""
    if "_" in token:
        return None
    try:
        return float(token)
    except ValueError:
        return None


def _build_record(index: int, values: deque[float]) -> InputRecord:
    """Build an input record from exactly seven ordered values."""
    x, y, z, px, py, pz, ekin = values
    return InputRecord(index=index, position=(x, y, z), momentum=(px, py, pz), ekin=ekin)


def _log_truncation(
    index: int,
    dangling_count: int,
    line_number: int | None,
    token: str | None,
) -> None:
    """Log where usable input ended."""
    _LOGGER.info(
        "input_truncated",
        record_index=index,
        dangling_values=dangling_count,
        line_number=line_number,
        token=token,
    )
