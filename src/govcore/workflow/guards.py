"""Composable authorization guards for workflow transitions.

A guard inspects an actor and an item and either passes (``evaluate``
returns None) or returns a denial message that can be shown to the user
verbatim. Guards combine with ``&``; the first failing guard wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable

from govcore.core.types import Role
from govcore.workflow.models import Actor, GovernanceItem

Check = Callable[[Actor, GovernanceItem], bool]


class Guard(ABC):
    """Base class for transition guards."""

    name: str = "guard"

    @abstractmethod
    def evaluate(self, actor: Actor, item: GovernanceItem) -> str | None:
        """Return None when the guard passes, else the denial message."""

    def allows(self, actor: Actor, item: GovernanceItem) -> bool:
        return self.evaluate(actor, item) is None

    def __and__(self, other: Guard) -> AllOf:
        return AllOf((self, other))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class Predicate(Guard):
    """A single named check with its denial message."""

    def __init__(self, name: str, check: Check, denial: str) -> None:
        self.name = name
        self.denial = denial
        self._check = check

    def evaluate(self, actor: Actor, item: GovernanceItem) -> str | None:
        return None if self._check(actor, item) else self.denial


class AllOf(Guard):
    """Conjunction of guards, evaluated in order."""

    def __init__(self, guards: Iterable[Guard]) -> None:
        flat: list[Guard] = []
        for guard in guards:
            if isinstance(guard, AllOf):
                flat.extend(guard.guards)
            else:
                flat.append(guard)
        self.guards: tuple[Guard, ...] = tuple(flat)
        self.name = " & ".join(g.name for g in self.guards)

    def evaluate(self, actor: Actor, item: GovernanceItem) -> str | None:
        for guard in self.guards:
            denial = guard.evaluate(actor, item)
            if denial is not None:
                return denial
        return None


def has_role(*roles: Role) -> Predicate:
    allowed = frozenset(roles)
    wording = " or ".join(role.value for role in roles)
    return Predicate(
        name=f"has_role({', '.join(role.value for role in roles)})",
        check=lambda actor, _item: actor.role in allowed,
        denial=f"This action requires the {wording} role",
    )


is_creator = Predicate(
    name="is_creator",
    check=lambda actor, item: actor.user_id == item.created_by,
    denial="Only the creator of this item can submit it for approval",
)

not_creator = Predicate(
    name="not_creator",
    check=lambda actor, item: actor.user_id != item.created_by,
    denial="You cannot approve or reject an item you created",
)

same_department = Predicate(
    name="same_department",
    check=lambda actor, item: (
        actor.department_id is not None and actor.department_id == item.owner_department
    ),
    denial="Directors can only review items owned by their own department",
)
