"""Approval workflow engine for governance items.

Applies the transition tables in ``govcore.workflow.table`` to an item
snapshot on behalf of an actor. The engine is a pure decision function: it
performs no I/O, never mutates its arguments, and reports every expected
refusal as a ``Denied`` value rather than raising.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Mapping

from govcore.core.types import (
    REVIEW_ACTIONS,
    ActionName,
    ApprovalStatus,
    DenialCode,
    ItemKind,
)
from govcore.risk.models import ValidationResult
from govcore.risk.scoring import (
    item_date_input,
    item_score_input,
    missing_assessments,
    validate_dates,
    validate_score,
)
from govcore.workflow.guards import not_creator
from govcore.workflow.models import (
    ACTIVE_STATUS,
    Actor,
    Applied,
    Denied,
    GovernanceItem,
    TransitionInput,
    TransitionResult,
)
from govcore.workflow.table import (
    DEFAULT_VARIANTS,
    Stamp,
    TransitionRule,
    WorkflowVariant,
)

logger = logging.getLogger(__name__)

REJECTION_REASON_REQUIRED = "A rejection reason is required"


class UnknownItemKindError(LookupError):
    """No workflow variant is registered for an item's kind."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _local_date(moment: datetime) -> date:
    """Calendar date of ``moment`` in the local timezone, as ``date.today()`` sees it."""
    return moment.astimezone().date()


class ApprovalWorkflowEngine:
    """Finite state machine over governance item approval states.

    Args:
        variants: Workflow variant per item kind. Defaults to the risk,
            internal-control action and quality process variants.
        clock: Source of the current time used for review/approval stamps
            and date validation when ``now`` is not passed explicitly.
    """

    def __init__(
        self,
        variants: Mapping[ItemKind, WorkflowVariant] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._variants: dict[ItemKind, WorkflowVariant] = dict(variants or DEFAULT_VARIANTS)
        self._clock = clock or _utcnow

    def variant_for(self, kind: ItemKind) -> WorkflowVariant:
        """Return the workflow variant for an item kind.

        Raises:
            UnknownItemKindError: If no variant is registered for ``kind``.
        """
        try:
            return self._variants[kind]
        except KeyError:
            raise UnknownItemKindError(
                f"No workflow registered for item kind {kind!r}. "
                f"Known kinds: {[str(k) for k in self._variants]}"
            ) from None

    def transition(
        self,
        item: GovernanceItem,
        actor: Actor,
        action: ActionName | str,
        payload: TransitionInput | None = None,
        *,
        now: datetime | None = None,
    ) -> TransitionResult:
        """Attempt ``action`` on ``item`` as ``actor``.

        Returns:
            ``Applied`` with the updated item and a human-readable message,
            or ``Denied`` with a code and a reason that can be displayed
            verbatim.

        Raises:
            ValueError: If ``action`` is not a known action name.
            UnknownItemKindError: If the item's kind has no workflow.
        """
        action = ActionName(action)
        payload = payload or TransitionInput()
        now = now or self._clock()
        variant = self.variant_for(item.kind)

        # Creators never review their own items, whatever the state
        if action in REVIEW_ACTIONS:
            denial = not_creator.evaluate(actor, item)
            if denial is not None:
                return self._deny(item, action, DenialCode.UNAUTHORIZED, denial)

        rule = variant.rule_for(item.approval_status, action)
        if rule is None:
            return self._deny(
                item,
                action,
                DenialCode.INVALID_STATE,
                f"Cannot {action.value.replace('_', ' ')} a {variant.label} "
                f"that is {item.approval_status.value.replace('_', ' ')}",
            )

        scoring_required = rule.checks_scoring and variant.scored

        # A submission is refused on invalid scoring whoever submits it
        if scoring_required and action is ActionName.SUBMIT:
            denied = self._check_scoring(item, action, _local_date(now))
            if denied is not None:
                return denied

        denial = rule.guard.evaluate(actor, item)
        if denial is not None:
            return self._deny(item, action, DenialCode.UNAUTHORIZED, denial)

        reason = (payload.rejection_reason or "").strip()
        if rule.requires_reason and not reason:
            return self._deny(
                item, action, DenialCode.VALIDATION_FAILED, REJECTION_REASON_REQUIRED
            )

        if scoring_required and action is not ActionName.SUBMIT:
            denied = self._check_scoring(item, action, _local_date(now))
            if denied is not None:
                return denied

        updated = item.model_copy(update=self._updates(variant, rule, actor, reason, now))
        message = (
            f"{variant.label.capitalize()} '{item.label}' {rule.outcome} "
            f"by {actor.user_id} ({item.approval_status.value} -> {rule.target.value})"
        )
        if rule.requires_reason:
            message += f": {reason}"

        logger.debug("Applied %s on %s %s: %s", action.value, item.kind.value, item.id, message)
        return Applied(
            item=updated,
            action=action,
            from_status=item.approval_status,
            to_status=rule.target,
            message=message,
        )

    def available_actions(self, item: GovernanceItem, actor: Actor) -> list[ActionName]:
        """Actions the actor may currently take, ignoring input-dependent checks."""
        variant = self.variant_for(item.kind)
        actions: list[ActionName] = []
        for rule in variant.rules_from(item.approval_status):
            if rule.action in REVIEW_ACTIONS and not not_creator.allows(actor, item):
                continue
            if rule.guard.allows(actor, item):
                actions.append(rule.action)
        return actions

    def validate_item(self, item: GovernanceItem, today: date | None = None) -> ValidationResult:
        """Run the scoring precondition checked before submission and approval.

        Items whose workflow is not scored are always valid.
        """
        if not self.variant_for(item.kind).scored:
            return ValidationResult(is_valid=True)

        missing = missing_assessments(item)
        if missing:
            return ValidationResult.from_messages(missing, [])

        result = validate_score(item_score_input(item))
        today = today or _local_date(self._clock())
        dates = validate_dates(item_date_input(item), today=today)
        return result.merge(dates)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_scoring(
        self, item: GovernanceItem, action: ActionName, today: date
    ) -> Denied | None:
        result = self.validate_item(item, today=today)
        if result.is_valid:
            return None
        return self._deny(
            item,
            action,
            DenialCode.VALIDATION_FAILED,
            "; ".join(result.errors),
            errors=result.errors,
        )

    @staticmethod
    def _updates(
        variant: WorkflowVariant,
        rule: TransitionRule,
        actor: Actor,
        reason: str,
        now: datetime,
    ) -> dict[str, Any]:
        updates: dict[str, Any] = {"approval_status": rule.target}

        if rule.resets_review:
            updates.update(
                rejection_reason=None,
                reviewed_by=None,
                reviewed_at=None,
                approved_by=None,
                approved_at=None,
            )
        if rule.stamp is Stamp.REVIEW:
            updates.update(reviewed_by=actor.user_id, reviewed_at=now)
        elif rule.stamp is Stamp.APPROVAL:
            updates.update(approved_by=actor.user_id, approved_at=now)

        if rule.requires_reason:
            updates["rejection_reason"] = reason
        elif variant.activates_on_approval and rule.target is ApprovalStatus.APPROVED:
            updates["status"] = ACTIVE_STATUS

        return updates

    @staticmethod
    def _deny(
        item: GovernanceItem,
        action: ActionName,
        code: DenialCode,
        reason: str,
        errors: list[str] | None = None,
    ) -> Denied:
        logger.debug(
            "Denied %s on %s %s (%s): %s",
            action.value, item.kind.value, item.id, code.value, reason,
        )
        return Denied(action=action, code=code, reason=reason, errors=list(errors or []))
