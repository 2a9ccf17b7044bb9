"""CSV→CTV normalizer for generic bank transaction exports.

Bank exports disagree on header spelling, so each canonical field is resolved
from an ordered list of candidate headers and the first non-empty value wins.
Normalization is best-effort: a dirty row degrades to empty strings and a
zero amount instead of failing the batch. Parsing follows RFC 4180 rules via
the stdlib :mod:`csv` module.

Out of scope: currency conversion, deduplication, and any categorization
beyond inflow/outflow.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterable, Sequence
from io import StringIO
from typing import Any

from .ctv import CanonicalTransaction
from .logging_setup import get_logger
from .models import RawRecord

logger = get_logger(__name__)

# Candidate headers in priority order. The second ``amount`` is a no-op.
DATE_KEYS: tuple[str, ...] = ("date", "Date")
DESCRIPTION_KEYS: tuple[str, ...] = ("description", "Description")
AMOUNT_KEYS: tuple[str, ...] = ("amount", "Amount", " Amount", "amount")

_AMOUNT_NOISE = re.compile(r"[$,\s]")
# Longest leading decimal literal, like JavaScript's parseFloat.
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


# ---------------------------------------------------------------------------
# Helpers (field lookup, amount parsing, CSV loading)
# ---------------------------------------------------------------------------


def _first_present(row: RawRecord, keys: Sequence[str], default: Any) -> Any:
    """Return the first truthy value among ``keys``; ``default`` otherwise."""

    for key in keys:
        value = row.get(key)
        if value:
            return value
    return default


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def parse_amount(raw: Any) -> float:
    """Parse a currency string such as ``"$1,234.56"`` into a float.

    ``$``, ``,`` and whitespace are removed before parsing. Only the leading
    numeric literal counts (``"12.50USD"`` -> ``12.5``). Anything that does
    not start with a number yields ``0.0``.

    Non-string input also yields ``0.0`` even when it is already numeric:
    exports parsed from CSV text are always strings, and the historical
    behavior for other values is zero.
    """

    if not isinstance(raw, str):
        logger.debug("non-text amount %r normalized to 0", raw)
        return 0.0
    cleaned = _AMOUNT_NOISE.sub("", raw)
    m = _FLOAT_PREFIX.match(cleaned)
    if m is None:
        logger.debug("unparseable amount %r normalized to 0", raw)
        return 0.0
    return float(m.group(0))


def _dedupe_headers(header: list[str]) -> list[str]:
    """Keep the first occurrence of each name; rename repeats ``name_1``, ``name_2``..."""

    seen: set[str] = set()
    out: list[str] = []
    for name in header:
        unique = name
        n = 0
        while unique in seen:
            n += 1
            unique = f"{name}_{n}"
        seen.add(unique)
        out.append(unique)
    return out


def read_csv_rows(csv_text: str) -> list[dict[str, str]]:
    """Parse header-row CSV text into a list of ``{header: cell}`` dicts.

    Blank lines are skipped. Extra cells beyond the header are dropped and
    missing trailing cells read as ``""``. A leading UTF-8 BOM is stripped
    from the first header. A repeated header keeps its name on the first
    column; later copies become ``Amount_1``, ``Amount_2`` and so on, so
    lookups by the plain name read the leftmost column.

    A malformed record stops parsing; rows read before it are returned.
    """

    csv_text = csv_text.removeprefix("\ufeff")
    rows: list[dict[str, str]] = []
    with StringIO(csv_text, newline="") as f:
        reader = csv.reader(f)
        try:
            header = next((r for r in reader if r), None)
            if header is None:
                return rows
            fields = _dedupe_headers(header)
            for record in reader:
                if not record:
                    continue
                cells = record[: len(fields)]
                cells += [""] * (len(fields) - len(cells))
                rows.append(dict(zip(fields, cells)))
        except csv.Error as exc:
            logger.warning("CSV parsing stopped at line %d: %s", reader.line_num, exc)
    return rows


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_row(row: RawRecord) -> CanonicalTransaction:
    date = _first_present(row, DATE_KEYS, "")
    description = _first_present(row, DESCRIPTION_KEYS, "")
    raw_amount = _first_present(row, AMOUNT_KEYS, "0")
    return CanonicalTransaction(
        date=_as_text(date),
        description=_as_text(description),
        amount=parse_amount(raw_amount),
    )


def normalize(rows: Iterable[RawRecord]) -> list[CanonicalTransaction]:
    """Map raw rows to canonical transactions, one output per input row.

    No row is filtered here; rows with unusable dates are dropped later by
    the weekly aggregator.
    """

    return [normalize_row(r) for r in rows]


def normalize_csv_text(csv_text: str) -> list[CanonicalTransaction]:
    rows = read_csv_rows(csv_text)
    transactions = normalize(rows)
    logger.info("normalized %d transaction rows", len(transactions))
    return transactions


__all__ = [
    "AMOUNT_KEYS",
    "DATE_KEYS",
    "DESCRIPTION_KEYS",
    "normalize",
    "normalize_csv_text",
    "normalize_row",
    "parse_amount",
    "read_csv_rows",
]
