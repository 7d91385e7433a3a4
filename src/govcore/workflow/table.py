"""Transition tables for the governance item approval workflow.

Each item kind selects a workflow variant. Variants share the same rule
rows; internal-control actions swap director review for a unit-level
approval step ahead of management approval.

    Risk / QualityProcess:
        Draft|Rejected --submit--> InReview --director_approve--> PendingApproval
        PendingApproval --admin_approve--> Approved
    ControlAction:
        Draft|Rejected --submit--> UnitApprovalPending --unit_approve--> PendingApproval
        PendingApproval --admin_approve--> Approved

Every *_reject action leads to Rejected.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from govcore.core.types import ActionName, ApprovalStatus, ItemKind, Role
from govcore.workflow.guards import Guard, has_role, is_creator, same_department


class Stamp(StrEnum):
    """Which decision metadata a transition records on the item."""

    NONE = "none"
    REVIEW = "review"
    APPROVAL = "approval"


class TransitionRule(BaseModel):
    """One row of a transition table."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    sources: frozenset[ApprovalStatus]
    action: ActionName
    target: ApprovalStatus
    guard: Guard
    outcome: str
    stamp: Stamp = Stamp.NONE
    requires_reason: bool = False
    checks_scoring: bool = False
    resets_review: bool = False


class WorkflowVariant(BaseModel):
    """Transition table and terminology for one item kind."""

    model_config = {"frozen": True}

    kind: ItemKind
    label: str
    rules: tuple[TransitionRule, ...]
    scored: bool = False
    activates_on_approval: bool = False

    def rule_for(self, status: ApprovalStatus, action: ActionName) -> TransitionRule | None:
        for rule in self.rules:
            if rule.action == action and status in rule.sources:
                return rule
        return None

    def rules_from(self, status: ApprovalStatus) -> list[TransitionRule]:
        return [rule for rule in self.rules if status in rule.sources]


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

DIRECTOR_OF_OWNING_DEPARTMENT = has_role(Role.DIRECTOR) & same_department
ORGANIZATION_ADMIN = has_role(Role.ADMIN, Role.SUPER_ADMIN)

_SUBMITTABLE = frozenset({ApprovalStatus.DRAFT, ApprovalStatus.REJECTED})


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

SUBMIT_FOR_REVIEW = TransitionRule(
    sources=_SUBMITTABLE,
    action=ActionName.SUBMIT,
    target=ApprovalStatus.IN_REVIEW,
    guard=is_creator,
    outcome="submitted for director review",
    checks_scoring=True,
    resets_review=True,
)

SUBMIT_FOR_UNIT_APPROVAL = TransitionRule(
    sources=_SUBMITTABLE,
    action=ActionName.SUBMIT,
    target=ApprovalStatus.UNIT_APPROVAL_PENDING,
    guard=is_creator,
    outcome="submitted for unit approval",
    checks_scoring=True,
    resets_review=True,
)

DIRECTOR_APPROVE = TransitionRule(
    sources=frozenset({ApprovalStatus.IN_REVIEW}),
    action=ActionName.DIRECTOR_APPROVE,
    target=ApprovalStatus.PENDING_APPROVAL,
    guard=DIRECTOR_OF_OWNING_DEPARTMENT,
    outcome="approved by the director and forwarded for final approval",
    stamp=Stamp.REVIEW,
    checks_scoring=True,
)

DIRECTOR_REJECT = TransitionRule(
    sources=frozenset({ApprovalStatus.IN_REVIEW}),
    action=ActionName.DIRECTOR_REJECT,
    target=ApprovalStatus.REJECTED,
    guard=DIRECTOR_OF_OWNING_DEPARTMENT,
    outcome="rejected by the director",
    stamp=Stamp.REVIEW,
    requires_reason=True,
)

UNIT_APPROVE = TransitionRule(
    sources=frozenset({ApprovalStatus.UNIT_APPROVAL_PENDING}),
    action=ActionName.UNIT_APPROVE,
    target=ApprovalStatus.PENDING_APPROVAL,
    guard=DIRECTOR_OF_OWNING_DEPARTMENT,
    outcome="approved at unit level and forwarded for management approval",
    stamp=Stamp.REVIEW,
    checks_scoring=True,
)

UNIT_REJECT = TransitionRule(
    sources=frozenset({ApprovalStatus.UNIT_APPROVAL_PENDING}),
    action=ActionName.UNIT_REJECT,
    target=ApprovalStatus.REJECTED,
    guard=DIRECTOR_OF_OWNING_DEPARTMENT,
    outcome="rejected at unit level",
    stamp=Stamp.REVIEW,
    requires_reason=True,
)

ADMIN_APPROVE = TransitionRule(
    sources=frozenset({ApprovalStatus.PENDING_APPROVAL}),
    action=ActionName.ADMIN_APPROVE,
    target=ApprovalStatus.APPROVED,
    guard=ORGANIZATION_ADMIN,
    outcome="given final approval",
    stamp=Stamp.APPROVAL,
    checks_scoring=True,
)

ADMIN_REJECT = TransitionRule(
    sources=frozenset({ApprovalStatus.PENDING_APPROVAL}),
    action=ActionName.ADMIN_REJECT,
    target=ApprovalStatus.REJECTED,
    guard=ORGANIZATION_ADMIN,
    outcome="rejected at final approval",
    stamp=Stamp.APPROVAL,
    requires_reason=True,
)

STANDARD_RULES: tuple[TransitionRule, ...] = (
    SUBMIT_FOR_REVIEW,
    DIRECTOR_APPROVE,
    DIRECTOR_REJECT,
    ADMIN_APPROVE,
    ADMIN_REJECT,
)

CONTROL_ACTION_RULES: tuple[TransitionRule, ...] = (
    SUBMIT_FOR_UNIT_APPROVAL,
    UNIT_APPROVE,
    UNIT_REJECT,
    ADMIN_APPROVE,
    ADMIN_REJECT,
)


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

RiskWorkflow = WorkflowVariant(
    kind=ItemKind.RISK,
    label="risk",
    rules=STANDARD_RULES,
    scored=True,
    activates_on_approval=True,
)

ControlActionWorkflow = WorkflowVariant(
    kind=ItemKind.CONTROL_ACTION,
    label="internal control action",
    rules=CONTROL_ACTION_RULES,
)

QualityProcessWorkflow = WorkflowVariant(
    kind=ItemKind.QUALITY_PROCESS,
    label="quality process",
    rules=STANDARD_RULES,
)

DEFAULT_VARIANTS: dict[ItemKind, WorkflowVariant] = {
    variant.kind: variant
    for variant in (RiskWorkflow, ControlActionWorkflow, QualityProcessWorkflow)
}
