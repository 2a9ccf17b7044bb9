"""Canonical Transaction View (CTV) model.

Every normalized row has the same four fields regardless of how the source
CSV spelled its headers:

    - date: string (raw, expected ``YYYY-MM-DD``; empty when absent)
    - description: string (may be empty)
    - amount: float (signed; ``0.0`` when missing or unparseable)
    - type: ``"inflow"`` | ``"outflow"`` (derived from ``amount``)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

type TransactionType = Literal["inflow", "outflow"]


@dataclass(frozen=True, slots=True)
class CanonicalTransaction:
    """A single canonicalized transaction row.

    ``type`` is a read-only property computed from ``amount`` so the two can
    never disagree.
    """

    date: str
    description: str
    amount: float

    @property
    def type(self) -> TransactionType:
        return "inflow" if self.amount >= 0 else "outflow"


__all__ = ["CanonicalTransaction", "TransactionType"]
