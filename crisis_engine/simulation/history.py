"""
Append-only history of per-tick records.

Provides HistoryLog — the driver-owned sequence of HistoryRecord objects.
Supports serialisation to list-of-dicts for the renderer and numpy series
extraction for analysis.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import numpy as np
from numpy.typing import NDArray

from ..core.record import HistoryRecord

_SERIES_FIELDS = (
    "wsi",
    "soc",
    "theta",
    "w_acc",
    "trust",
    "wealth",
    "political_power",
    "regime_payoff",
    "opposition_payoff",
    "population_payoff",
)


class HistoryLog:
    """Ordered record of the ticks completed since the last reset.

    Intended for use as the scheduler's sink:

        history = HistoryLog()
        scheduler = TickScheduler(engine, history=history)

    Attributes:
        max_records: Maximum number of records to retain (None = unlimited).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        """Initialise an empty log.

        Args:
            max_records: If set, older records are discarded when the buffer
                         exceeds this limit (FIFO).
        """
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[HistoryRecord] = []

    def append(self, record: HistoryRecord) -> None:
        """Append a record; ticks must be strictly increasing.

        Raises:
            ValueError: If record.tick does not follow the latest tick.
        """
        if self._records and record.tick <= self._records[-1].tick:
            raise ValueError(
                f"History is append-only: tick {record.tick} after "
                f"{self._records[-1].tick}"
            )
        self._records.append(record)
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)  # FIFO eviction

    def records(self) -> List[HistoryRecord]:
        """Return all records in chronological order (copy)."""
        return list(self._records)

    def latest(self) -> Optional[HistoryRecord]:
        return self._records[-1] if self._records else None

    def clear(self) -> None:
        """Empty the log."""
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(list(self._records))

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Serialise every record with the front-end chart keys."""
        return [r.to_dict() for r in self._records]

    def series(self, name: str) -> NDArray[np.float64]:
        """Time-series of one numeric record field.

        Raises:
            KeyError: If name is not a numeric record field.
        """
        if name not in _SERIES_FIELDS:
            raise KeyError(
                f"Unknown series {name!r}. Available: {list(_SERIES_FIELDS)}"
            )
        return np.array([getattr(r, name) for r in self._records], dtype=np.float64)
