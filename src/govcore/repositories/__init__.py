"""Repository layer for govcore.

Protocols for the persistence and audit collaborators, the status
normalization boundary for stored records, and in-memory implementations.
"""

from govcore.repositories.memory import InMemoryAuditSink, InMemoryGovernanceItemRepository
from govcore.repositories.protocols import (
    AuditSink,
    GovernanceItemRepository,
    VersionConflictError,
)
from govcore.repositories.records import (
    GovernanceRecordAdapter,
    StatusNormalizer,
    UnknownStatusError,
)

__all__ = [
    "AuditSink",
    "GovernanceItemRepository",
    "GovernanceRecordAdapter",
    "InMemoryAuditSink",
    "InMemoryGovernanceItemRepository",
    "StatusNormalizer",
    "UnknownStatusError",
    "VersionConflictError",
]
