"""Domain records read from the user and group stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class TimeEntry:
    """A single clock-in/clock-out pair."""

    clock_in: datetime
    clock_out: Optional[datetime] = None

    @property
    def hours(self) -> Optional[float]:
        """Worked hours, or None while the entry is still open."""
        if self.clock_out is None:
            return None
        return (self.clock_out - self.clock_in).total_seconds() / 3600


@dataclass(frozen=True)
class ExpenseReceipt:
    """An uploaded expense receipt."""

    date: datetime
    category: str
    note: str = ""
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class User:
    id: str
    first_name: str
    last_name: str
    times: Tuple[TimeEntry, ...] = field(default_factory=tuple)
    receipts: Tuple[ExpenseReceipt, ...] = field(default_factory=tuple)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    members: Tuple[str, ...] = field(default_factory=tuple)
