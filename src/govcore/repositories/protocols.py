"""Protocol definitions for the collaborators the workflow core relies on.

Persistence and audit storage live outside the core. Any implementation
satisfying these runtime-checkable protocols can back ``ReviewService``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from govcore.core.types import ApprovalStatus, AuditEvent, ItemKind
from govcore.workflow.models import GovernanceItem


class VersionConflictError(Exception):
    """The stored item changed since it was read (optimistic concurrency)."""

    def __init__(self, item_id: str, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Governance item {item_id!r} is at version {actual_version}, "
            f"expected {expected_version}."
        )
        self.item_id = item_id
        self.expected_version = expected_version
        self.actual_version = actual_version


@runtime_checkable
class GovernanceItemRepository(Protocol):
    """Protocol for governance item storage with optimistic versioning."""

    def get(self, item_id: str) -> GovernanceItem | None: ...

    def add(self, item: GovernanceItem) -> GovernanceItem: ...

    def save(self, item: GovernanceItem, expected_version: int) -> GovernanceItem: ...

    def list_items(
        self,
        status: ApprovalStatus | None = None,
        kind: ItemKind | None = None,
    ) -> list[GovernanceItem]: ...


@runtime_checkable
class AuditSink(Protocol):
    """Protocol for the audit log / notification collaborator."""

    def record(self, event: AuditEvent) -> None: ...

    def query(self, filters: dict[str, Any] | None = None) -> list[AuditEvent]: ...
