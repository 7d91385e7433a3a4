"""Review service: drives the workflow engine against stored items.

Loads a fresh item from the repository, asks the engine for a decision,
writes the result back with an optimistic version check and hands an audit
event to the audit sink. Storage conflicts are reported the same way as a
stale client view (``Denied`` with ``invalid_state``).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from pydantic import BaseModel

from govcore.core.config import Settings
from govcore.core.types import ActionName, ApprovalStatus, AuditEvent, DenialCode
from govcore.repositories.memory import InMemoryAuditSink, InMemoryGovernanceItemRepository
from govcore.repositories.protocols import (
    AuditSink,
    GovernanceItemRepository,
    VersionConflictError,
)
from govcore.repositories.records import GovernanceRecordAdapter, StatusNormalizer
from govcore.risk.models import ReviewStatus
from govcore.risk.scoring import review_status
from govcore.workflow.engine import ApprovalWorkflowEngine
from govcore.workflow.models import (
    Actor,
    Applied,
    Denied,
    GovernanceItem,
    TransitionInput,
    TransitionResult,
)

logger = logging.getLogger(__name__)

# Review metadata a resubmission wipes from the item
_REVIEW_FIELDS = {"rejection_reason", "reviewed_by", "reviewed_at", "approved_by", "approved_at"}


class BatchItemResult(BaseModel):
    """Outcome for one item of a batch."""

    item_id: str
    result: TransitionResult

    @property
    def ok(self) -> bool:
        return self.result.ok


class ReviewService:
    """Applies workflow actions to stored governance items.

    Args:
        engine: The decision engine.
        repository: Item storage with optimistic versioning.
        audit_sink: Optional collaborator receiving one event per applied
            transition.
        due_soon_days: Window used by ``review_status``.
    """

    def __init__(
        self,
        engine: ApprovalWorkflowEngine,
        repository: GovernanceItemRepository,
        audit_sink: AuditSink | None = None,
        due_soon_days: int = 7,
    ) -> None:
        self._engine = engine
        self._repository = repository
        self._audit = audit_sink
        self._due_soon_days = due_soon_days

    @property
    def engine(self) -> ApprovalWorkflowEngine:
        return self._engine

    @property
    def repository(self) -> GovernanceItemRepository:
        return self._repository

    def apply(
        self,
        item_id: str,
        actor: Actor,
        action: ActionName | str,
        payload: TransitionInput | None = None,
    ) -> TransitionResult:
        """Apply one action to one stored item.

        A missing item or a concurrent modification yields ``Denied`` with
        ``invalid_state``; the caller should refetch and retry. Audit sink
        failures are logged and do not undo or hide a stored transition.
        """
        action = ActionName(action)
        item = self._repository.get(item_id)
        if item is None:
            logger.warning("Governance item %s not found for %s", item_id, action.value)
            return Denied(
                action=action,
                code=DenialCode.INVALID_STATE,
                reason=f"Item '{item_id}' was not found; refresh and try again",
            )

        result = self._engine.transition(item, actor, action, payload)
        if isinstance(result, Denied):
            return result

        try:
            saved = self._repository.save(result.item, expected_version=item.version)
        except VersionConflictError as exc:
            logger.warning("Concurrent update rejected for %s: %s", item_id, exc)
            return Denied(
                action=action,
                code=DenialCode.INVALID_STATE,
                reason="This item was changed by someone else; refresh and try again",
            )
        except KeyError:
            logger.warning(
                "Governance item %s disappeared before %s was saved", item_id, action.value
            )
            return Denied(
                action=action,
                code=DenialCode.INVALID_STATE,
                reason=f"Item '{item_id}' was not found; refresh and try again",
            )

        result = result.model_copy(update={"item": saved})
        if self._audit is not None:
            # Already stored; sink failures are logged, not raised
            try:
                self._audit.record(self._audit_event(item, result, actor))
            except Exception:
                logger.exception("Audit sink failed to record %s on %s", action.value, item_id)

        logger.info("%s", result.message)
        return result

    def apply_batch(
        self,
        item_ids: Iterable[str],
        actor: Actor,
        action: ActionName | str,
        payload: TransitionInput | None = None,
    ) -> list[BatchItemResult]:
        """Apply the same action to several items, each independently.

        Partial success is expected; one item's denial never undoes another's
        applied transition.
        """
        return [
            BatchItemResult(item_id=item_id, result=self.apply(item_id, actor, action, payload))
            for item_id in item_ids
        ]

    def pending_for(self, actor: Actor) -> list[GovernanceItem]:
        """Items on which ``actor`` currently has at least one action available."""
        return [
            item for item in self._repository.list_items()
            if item.approval_status not in (ApprovalStatus.DRAFT, ApprovalStatus.REJECTED)
            and self._engine.available_actions(item, actor)
        ]

    def review_status(self, item_id: str, today: date | None = None) -> ReviewStatus | None:
        item = self._repository.get(item_id)
        if item is None:
            return None
        return review_status(item.next_review_date, today=today, due_soon_days=self._due_soon_days)

    @staticmethod
    def _audit_event(before: GovernanceItem, result: Applied, actor: Actor) -> AuditEvent:
        details: dict[str, object] = {"version": result.item.version}
        if result.action is ActionName.SUBMIT:
            cleared = {
                key: value
                for key, value in before.model_dump(mode="json", include=_REVIEW_FIELDS).items()
                if value is not None
            }
            if cleared:
                details["cleared"] = cleared
        if result.to_status is ApprovalStatus.REJECTED:
            details["rejection_reason"] = result.item.rejection_reason

        return AuditEvent(
            actor=actor.user_id,
            action=result.action,
            resource=before.id,
            kind=before.kind,
            from_status=result.from_status,
            to_status=result.to_status,
            message=result.message,
            details=details,
        )


def create_review_service(
    settings: Settings | None = None,
    repository: GovernanceItemRepository | None = None,
    audit_sink: AuditSink | None = None,
) -> ReviewService:
    """Wire a ReviewService from settings, defaulting to in-memory collaborators."""
    settings = settings or Settings()
    logging.getLogger("govcore").setLevel(settings.log_level.upper())

    if repository is None:
        normalizer = StatusNormalizer(config_path=settings.workflow.status_aliases_path)
        repository = InMemoryGovernanceItemRepository(
            adapter=GovernanceRecordAdapter(normalizer)
        )

    return ReviewService(
        engine=ApprovalWorkflowEngine(),
        repository=repository,
        audit_sink=audit_sink if audit_sink is not None else InMemoryAuditSink(),
        due_soon_days=settings.workflow.due_soon_days,
    )
