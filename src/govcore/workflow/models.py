"""Data models for the governance item approval workflow."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from govcore.core.types import (
    ActionName,
    ApprovalStatus,
    DenialCode,
    ItemKind,
    RiskResponse,
    Role,
)

# Lifecycle status a risk receives once it is finally approved
ACTIVE_STATUS = "active"


class GovernanceItem(BaseModel):
    """A risk, internal-control action or quality process change under review.

    Items are immutable values; the engine returns an updated copy on every
    applied transition. ``version`` belongs to the persistence layer and is
    never changed by the engine.
    """

    model_config = {"frozen": True}

    id: str
    kind: ItemKind
    approval_status: ApprovalStatus = ApprovalStatus.DRAFT
    created_by: str
    owner_department: str | None = None
    title: str = ""
    description: str = ""
    status: str | None = None
    rejection_reason: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    version: int = 0

    # Scoring (risk items only)
    inherent_likelihood: int | None = None
    inherent_impact: int | None = None
    residual_likelihood: int | None = None
    residual_impact: int | None = None
    target_likelihood: int | None = None
    target_impact: int | None = None
    risk_response: RiskResponse | None = None
    identified_date: date | None = None
    last_review_date: date | None = None
    next_review_date: date | None = None
    target_date: date | None = None

    @property
    def label(self) -> str:
        return self.title or self.id


class Actor(BaseModel):
    """Authorization context of an already-authenticated caller."""

    model_config = {"frozen": True}

    user_id: str
    role: Role
    department_id: str | None = None


class TransitionInput(BaseModel):
    """Optional caller input accompanying an action."""

    model_config = {"frozen": True}

    rejection_reason: str | None = None


class Applied(BaseModel):
    """A transition that was allowed; ``item`` is the new item value."""

    model_config = {"frozen": True}

    outcome: Literal["applied"] = "applied"
    item: GovernanceItem
    action: ActionName
    from_status: ApprovalStatus
    to_status: ApprovalStatus
    message: str

    @property
    def ok(self) -> bool:
        return True


class Denied(BaseModel):
    """A refused transition. The item is left untouched."""

    model_config = {"frozen": True}

    outcome: Literal["denied"] = "denied"
    action: ActionName
    code: DenialCode
    reason: str
    errors: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False


TransitionResult = Applied | Denied
