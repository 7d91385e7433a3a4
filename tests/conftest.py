"""Shared test fixtures and helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from govcore.core.types import ApprovalStatus, ItemKind, RiskResponse, Role
from govcore.workflow.engine import ApprovalWorkflowEngine
from govcore.workflow.models import Actor, GovernanceItem

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def engine() -> ApprovalWorkflowEngine:
    return ApprovalWorkflowEngine(clock=lambda: NOW)


@pytest.fixture()
def make_item() -> Callable[..., GovernanceItem]:
    """Factory for governance items; defaults to a valid draft risk.

    Inherent score 25 (5x5), residual score 4 (2x2).
    """

    def _make(**overrides: Any) -> GovernanceItem:
        defaults: dict[str, Any] = {
            "id": "RSK-001",
            "kind": ItemKind.RISK,
            "approval_status": ApprovalStatus.DRAFT,
            "created_by": "author",
            "owner_department": "finance",
            "title": "Cash handling errors at service desks",
            "description": "Manual cash reconciliation at district offices.",
            "inherent_likelihood": 5,
            "inherent_impact": 5,
            "residual_likelihood": 2,
            "residual_impact": 2,
            "risk_response": RiskResponse.MITIGATE,
        }
        defaults.update(overrides)
        return GovernanceItem(**defaults)

    return _make


@pytest.fixture()
def author() -> Actor:
    return Actor(user_id="author", role=Role.STAFF, department_id="finance")


@pytest.fixture()
def director() -> Actor:
    return Actor(user_id="dir-finance", role=Role.DIRECTOR, department_id="finance")


@pytest.fixture()
def other_director() -> Actor:
    return Actor(user_id="dir-parks", role=Role.DIRECTOR, department_id="parks")


@pytest.fixture()
def admin() -> Actor:
    return Actor(user_id="admin-1", role=Role.ADMIN, department_id="strategy")


@pytest.fixture()
def super_admin() -> Actor:
    return Actor(user_id="root", role=Role.SUPER_ADMIN)


@pytest.fixture()
def staff() -> Actor:
    return Actor(user_id="clerk", role=Role.STAFF, department_id="finance")
