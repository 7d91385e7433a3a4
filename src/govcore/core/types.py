"""Core type definitions shared across all govcore modules."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ItemKind(StrEnum):
    """Kinds of governance item; each selects a workflow variant."""

    RISK = "risk"
    CONTROL_ACTION = "control_action"
    QUALITY_PROCESS = "quality_process"


class ApprovalStatus(StrEnum):
    """Approval state of a governance item."""

    DRAFT = "draft"
    IN_REVIEW = "in_review"
    UNIT_APPROVAL_PENDING = "unit_approval_pending"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class Role(StrEnum):
    """Organizational role of an authenticated actor."""

    STAFF = "staff"
    DIRECTOR = "director"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class ActionName(StrEnum):
    """Actions an actor can request against a governance item."""

    SUBMIT = "submit"
    DIRECTOR_APPROVE = "director_approve"
    DIRECTOR_REJECT = "director_reject"
    UNIT_APPROVE = "unit_approve"
    UNIT_REJECT = "unit_reject"
    ADMIN_APPROVE = "admin_approve"
    ADMIN_REJECT = "admin_reject"


APPROVE_ACTIONS: frozenset[ActionName] = frozenset({
    ActionName.DIRECTOR_APPROVE,
    ActionName.UNIT_APPROVE,
    ActionName.ADMIN_APPROVE,
})

REJECT_ACTIONS: frozenset[ActionName] = frozenset({
    ActionName.DIRECTOR_REJECT,
    ActionName.UNIT_REJECT,
    ActionName.ADMIN_REJECT,
})

REVIEW_ACTIONS: frozenset[ActionName] = APPROVE_ACTIONS | REJECT_ACTIONS


class DenialCode(StrEnum):
    """Why a transition was refused."""

    UNAUTHORIZED = "unauthorized"
    INVALID_STATE = "invalid_state"
    VALIDATION_FAILED = "validation_failed"

    @property
    def retryable(self) -> bool:
        """Only a stale view (invalid state) is safe to retry after a refetch."""
        return self is DenialCode.INVALID_STATE


class RiskLevel(StrEnum):
    """Five ordered risk tiers derived from a likelihood x impact score."""

    LOW = "low"
    LOW_MEDIUM = "low_medium"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class Effectiveness(StrEnum):
    """How effective treatment has been at reducing inherent risk."""

    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    GOOD = "good"
    EXCELLENT = "excellent"


class ReviewFrequency(StrEnum):
    """Recommended review cadence for a risk."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"


class RiskResponse(StrEnum):
    """Strategy chosen for treating a risk."""

    ACCEPT = "accept"
    MITIGATE = "mitigate"
    TRANSFER = "transfer"
    AVOID = "avoid"


class ReviewState(StrEnum):
    """Where a risk stands against its next scheduled review."""

    NOT_SCHEDULED = "not_scheduled"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    CURRENT = "current"


class AuditEvent(BaseModel):
    """Audit-worthy record of an applied transition, handed to an audit sink."""

    model_config = {"frozen": True}

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    actor: str
    action: ActionName
    resource: str
    kind: ItemKind
    from_status: ApprovalStatus
    to_status: ApprovalStatus
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
