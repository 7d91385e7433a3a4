"""In-memory governance item store and audit sink."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from govcore.core.types import ApprovalStatus, AuditEvent, ItemKind
from govcore.repositories.protocols import VersionConflictError
from govcore.repositories.records import GovernanceRecordAdapter
from govcore.workflow.models import GovernanceItem


class InMemoryGovernanceItemRepository:
    """In-memory dict store for governance items.

    Suitable for single-instance deployment and tests. ``save`` enforces
    optimistic concurrency: the caller passes the version it read, and the
    write fails if the stored item has moved on.
    """

    def __init__(self, adapter: GovernanceRecordAdapter | None = None) -> None:
        self._items: dict[str, GovernanceItem] = {}
        self._adapter = adapter or GovernanceRecordAdapter()

    def get(self, item_id: str) -> GovernanceItem | None:
        return self._items.get(item_id)

    def add(self, item: GovernanceItem) -> GovernanceItem:
        if item.id in self._items:
            raise ValueError(f"Governance item {item.id!r} already exists.")
        self._items[item.id] = item
        return item

    def save(self, item: GovernanceItem, expected_version: int) -> GovernanceItem:
        current = self._items.get(item.id)
        if current is None:
            raise KeyError(f"Governance item {item.id!r} not found.")
        if current.version != expected_version:
            raise VersionConflictError(item.id, expected_version, current.version)

        stored = item.model_copy(update={"version": expected_version + 1})
        self._items[item.id] = stored
        return stored

    def list_items(
        self,
        status: ApprovalStatus | None = None,
        kind: ItemKind | None = None,
    ) -> list[GovernanceItem]:
        return [
            item for item in self._items.values()
            if (status is None or item.approval_status == status)
            and (kind is None or item.kind == kind)
        ]

    # -- Stored records --

    def add_record(self, record: dict[str, Any]) -> GovernanceItem:
        return self.add(self._adapter.to_item(record))

    def export_records(self) -> list[dict[str, Any]]:
        return [self._adapter.to_record(item) for item in self._items.values()]

    @property
    def item_count(self) -> int:
        return len(self._items)


class InMemoryAuditSink:
    """Collects audit events in memory, in the order they were recorded."""

    def __init__(self) -> None:
        self._events: list[AuditEvent] = []

    def record(self, event: AuditEvent) -> None:
        self._events.append(event)

    def query(self, filters: dict[str, Any] | None = None) -> list[AuditEvent]:
        """Query recorded events with optional filters.

        Supported filter keys:
            - ``actor``: exact match on actor field
            - ``action``: exact match on action field
            - ``resource``: exact match on resource (item id)
            - ``kind``: exact match on item kind
            - ``after``: ISO datetime string; only events after this time
            - ``before``: ISO datetime string; only events before this time
        """
        filters = filters or {}
        after_dt = _parse_bound(filters.get("after"))
        before_dt = _parse_bound(filters.get("before"))

        results: list[AuditEvent] = []
        for event in self._events:
            if "actor" in filters and event.actor != filters["actor"]:
                continue
            if "action" in filters and event.action != filters["action"]:
                continue
            if "resource" in filters and event.resource != filters["resource"]:
                continue
            if "kind" in filters and event.kind != filters["kind"]:
                continue
            if after_dt and event.timestamp <= after_dt:
                continue
            if before_dt and event.timestamp >= before_dt:
                continue
            results.append(event)
        return results

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)


def _parse_bound(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
