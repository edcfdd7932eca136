"""Audit trail of raw channel responses.

One entry per (record, channel), keyed "{record_id}_{channel}". Entries hold
the full response body exactly as the channel returned it; a later publish of
the same record to the same channel overwrites the earlier entry.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from minhland_ads.docstore import DocumentStore

AUDIT_COLLECTION = "api_responses"


def audit_key(record_id: str, channel: str) -> str:
    return f"{record_id}_{channel}"


@dataclass
class AuditEntry:
    """A single channel response."""
    record_id: str
    channel: str
    status: str  # "success" or "failure"
    response: dict[str, Any] = field(default_factory=dict)
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    @property
    def key(self) -> str:
        return audit_key(self.record_id, self.channel)


class AuditRecorder:
    """Stores AuditEntry documents in a DocumentStore collection."""

    def __init__(self, store: DocumentStore | None = None) -> None:
        self._store = store or DocumentStore()

    def record(
        self,
        record_id: str,
        channel: str,
        response: dict[str, Any],
        status: str = "success",
    ) -> AuditEntry:
        entry = AuditEntry(record_id=record_id, channel=channel, status=status, response=response)
        self._store.set(AUDIT_COLLECTION, entry.key, asdict(entry))
        return entry

    def get(self, record_id: str, channel: str) -> AuditEntry | None:
        doc = self._store.get(AUDIT_COLLECTION, audit_key(record_id, channel))
        return AuditEntry(**doc) if doc else None

    def for_record(self, record_id: str) -> list[AuditEntry]:
        return [e for e in self.all_entries if e.record_id == record_id]

    def failures(self) -> list[AuditEntry]:
        return [e for e in self.all_entries if e.status == "failure"]

    @property
    def total_entries(self) -> int:
        return self._store.count(AUDIT_COLLECTION)

    @property
    def all_entries(self) -> list[AuditEntry]:
        return [AuditEntry(**doc) for doc in self._store.collection(AUDIT_COLLECTION).values()]
