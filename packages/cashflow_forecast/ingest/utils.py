"""Ingest utilities shared by CLI commands and the API.

Reading the export is the only blocking step before normalization; once the
text is in memory, parsing and aggregation run to completion in one pass.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from ..ctv import CanonicalTransaction
from ..logging_setup import get_logger
from ..normalizers import normalize_csv_text

logger = get_logger(__name__)


def decode_csv_bytes(data: bytes) -> str:
    """Decode an export as UTF-8 (BOM tolerated), falling back to Latin-1."""

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("input is not valid UTF-8; decoding as Latin-1")
        return data.decode("latin-1")


def read_csv_text(csv_path: str | PathLike[str]) -> str:
    """Return the decoded text of ``csv_path``.

    ``FileNotFoundError``/``PermissionError``/``IsADirectoryError`` propagate
    to the caller.
    """

    p = Path(csv_path)
    data = p.read_bytes()
    logger.debug("read %d bytes from %s", len(data), p)
    return decode_csv_bytes(data)


def load_transactions_from_csv(csv_path: str | PathLike[str]) -> list[CanonicalTransaction]:
    """Read a bank CSV export and return its canonical transactions."""

    return normalize_csv_text(read_csv_text(csv_path))


__all__ = ["decode_csv_bytes", "load_transactions_from_csv", "read_csv_text"]
