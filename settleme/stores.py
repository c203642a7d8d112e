"""Read-only user and group stores consumed by the aggregator."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Protocol

from .errors import NotFoundError, StoreError
from .formatting import to_amount, to_timestamp
from .models import ExpenseReceipt, Group, TimeEntry, User

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    def get(self, user_id: str) -> User:
        """Return the user or raise NotFoundError."""


class GroupStore(Protocol):
    def get(self, group_id: str) -> Group:
        """Return the group or raise NotFoundError."""


class _RecordView:
    """Lookup by id over parsed records or raw JSON objects.

    Raw objects are decoded on first lookup, so a malformed record only fails
    the exports that actually touch it.
    """

    def __init__(self, kind: str, records: Dict[str, Any], parser: Callable[[Mapping[str, Any]], Any]):
        self._kind = kind
        self._records = records
        self._parser = parser

    def get(self, record_id: str) -> Any:
        try:
            record = self._records[record_id]
        except KeyError:
            raise NotFoundError(self._kind, record_id) from None
        if isinstance(record, Mapping):
            try:
                record = self._parser(record)
            except (KeyError, TypeError, ValueError) as exc:
                raise StoreError(f"Invalid {self._kind} record {record_id!r}: {exc}") from exc
            self._records[record_id] = record
        return record

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class InMemoryStore:
    """Point-in-time snapshot of users and groups."""

    def __init__(self, users: Iterable[User] = (), groups: Iterable[Group] = ()) -> None:
        self.users = _RecordView("user", {u.id: u for u in users}, parse_user)
        self.groups = _RecordView("group", {g.id: g for g in groups}, parse_group)

    @classmethod
    def from_raw(
        cls,
        users: Mapping[str, Mapping[str, Any]],
        groups: Mapping[str, Mapping[str, Any]],
    ) -> "InMemoryStore":
        """Snapshot over undecoded JSON objects keyed by id."""
        store = cls()
        store.users = _RecordView("user", dict(users), parse_user)
        store.groups = _RecordView("group", dict(groups), parse_group)
        return store


# ===================== JSON data file =====================
def _parse_time_entry(raw: Mapping[str, Any]) -> TimeEntry:
    clock_out = raw.get("clockOut")
    return TimeEntry(
        clock_in=to_timestamp(raw["clockIn"]).to_pydatetime(),
        clock_out=to_timestamp(clock_out).to_pydatetime() if clock_out else None,
    )


def _parse_receipt(raw: Mapping[str, Any]) -> ExpenseReceipt:
    return ExpenseReceipt(
        date=to_timestamp(raw["date"]).to_pydatetime(),
        category=str(raw.get("category") or ""),
        note=str(raw.get("note") or ""),
        amount=to_amount(raw.get("amount")),
    )


def parse_user(raw: Mapping[str, Any]) -> User:
    return User(
        id=str(raw["id"]),
        first_name=str(raw.get("firstName") or ""),
        last_name=str(raw.get("lastName") or ""),
        times=tuple(_parse_time_entry(t) for t in raw.get("times") or []),
        receipts=tuple(_parse_receipt(r) for r in raw.get("receipts") or []),
    )


def parse_group(raw: Mapping[str, Any]) -> Group:
    return Group(
        id=str(raw["id"]),
        name=str(raw.get("name") or ""),
        members=tuple(str(m) for m in raw.get("members") or []),
    )


def _index_by_id(kind: str, records: Any) -> Dict[str, Mapping[str, Any]]:
    if records is not None and not isinstance(records, list):
        raise StoreError(f"'{kind}s' must be a list, got {type(records).__name__}")
    indexed: Dict[str, Mapping[str, Any]] = {}
    for idx, raw in enumerate(records or []):
        if not isinstance(raw, Mapping) or raw.get("id") is None:
            logger.warning("Skipping %s record at index %d: no id", kind, idx)
            continue
        indexed[str(raw["id"])] = raw
    return indexed


def parse_snapshot(data: Mapping[str, Any]) -> InMemoryStore:
    """Index the decoded ``{"users": [...], "groups": [...]}`` document by id.

    Records are decoded lazily; see `_RecordView`.
    """
    return InMemoryStore.from_raw(
        users=_index_by_id("user", data.get("users")),
        groups=_index_by_id("group", data.get("groups")),
    )


def load_snapshot(path: Optional[Path]) -> InMemoryStore:
    """Read the data file once and return an in-memory snapshot.

    A missing file means no users or groups have been registered yet; every
    lookup against the returned store then fails with NotFoundError.
    """
    if path is None or not Path(path).exists():
        logger.warning("Data file %s does not exist, using an empty snapshot", path)
        return InMemoryStore()

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StoreError(f"Data file {path} could not be read") from exc
    if not isinstance(data, dict):
        raise StoreError(f"Data file {path} must contain a JSON object")

    store = parse_snapshot(data)
    logger.debug("Loaded snapshot from %s: %d users, %d groups", path, len(store.users), len(store.groups))
    return store


__all__ = [
    "GroupStore",
    "InMemoryStore",
    "UserStore",
    "load_snapshot",
    "parse_group",
    "parse_snapshot",
    "parse_user",
]
