"""Approval workflow module for govcore.

Role-gated state machine taking governance items from draft to final
approval or rejection.
"""

from govcore.workflow.engine import ApprovalWorkflowEngine, UnknownItemKindError
from govcore.workflow.models import (
    Actor,
    Applied,
    Denied,
    GovernanceItem,
    TransitionInput,
    TransitionResult,
)

__all__ = [
    "Actor",
    "Applied",
    "ApprovalWorkflowEngine",
    "Denied",
    "GovernanceItem",
    "TransitionInput",
    "TransitionResult",
    "UnknownItemKindError",
]
