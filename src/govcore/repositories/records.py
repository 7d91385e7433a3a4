"""Translation between stored governance records and ``GovernanceItem`` values.

Stored records spell approval states in several ways (``'DRAFT'``,
``'draft'``, ``'pending-approval'``, Turkish ``'taslak'``,
``'birim_onayi_bekliyor'`` ...). This module is the only place those
strings are interpreted; past it, everything uses ``ApprovalStatus``.
Aliases are loaded from YAML config.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from govcore.core.config import CONFIG_DIR
from govcore.core.types import ApprovalStatus, ItemKind
from govcore.workflow.models import GovernanceItem

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = CONFIG_DIR / "status_aliases.yml"

# Column names used by older record layouts
_FIELD_ALIASES: dict[str, str] = {
    "name": "title",
    "owner_department_id": "owner_department",
    "responsible_department_id": "owner_department",
    "created_by_id": "created_by",
    "reviewed_by_id": "reviewed_by",
    "approved_by_id": "approved_by",
}

_KIND_ALIASES: dict[str, ItemKind] = {
    "risk": ItemKind.RISK,
    "control_action": ItemKind.CONTROL_ACTION,
    "controlaction": ItemKind.CONTROL_ACTION,
    "ic_action": ItemKind.CONTROL_ACTION,
    "internal_control_action": ItemKind.CONTROL_ACTION,
    "quality_process": ItemKind.QUALITY_PROCESS,
    "qualityprocess": ItemKind.QUALITY_PROCESS,
    "qm_process": ItemKind.QUALITY_PROCESS,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class UnknownStatusError(ValueError):
    """A stored status string matches no known approval state."""


def fold(raw: str) -> str:
    """Case-fold a stored token and unify hyphen/space separators."""
    return re.sub(r"[\s\-]+", "_", raw.strip()).lower()


def _field_name(key: str) -> str:
    snake = _CAMEL_BOUNDARY.sub("_", key).lower()
    return _FIELD_ALIASES.get(snake, snake)


class StatusNormalizer:
    """Maps stored status strings onto ``ApprovalStatus``.

    Canonical enum values are always recognised; additional spellings come
    from the ``statuses`` mapping in the YAML config.
    """

    def __init__(self, config_path: str | Path | None = None) -> None:
        self._config_path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
        self._aliases: dict[str, ApprovalStatus] = {s.value: s for s in ApprovalStatus}
        self._load_config()

    def _load_config(self) -> None:
        if not self._config_path.exists():
            logger.warning("Status alias config not found at %s", self._config_path)
            return
        with open(self._config_path) as fh:
            data = yaml.safe_load(fh) or {}

        for canonical, aliases in data.get("statuses", {}).items():
            status = ApprovalStatus(fold(canonical))
            for alias in aliases or []:
                self._aliases[fold(str(alias))] = status

    def normalize(self, raw: str | ApprovalStatus) -> ApprovalStatus:
        """Resolve a stored status to its enum value.

        Raises:
            UnknownStatusError: If the string is not a known spelling.
        """
        if isinstance(raw, ApprovalStatus):
            return raw
        try:
            return self._aliases[fold(raw)]
        except KeyError:
            raise UnknownStatusError(f"Unknown approval status {raw!r}.") from None

    @staticmethod
    def to_storage(status: ApprovalStatus) -> str:
        return status.value

    @property
    def aliases(self) -> dict[str, ApprovalStatus]:
        return dict(self._aliases)


class GovernanceRecordAdapter:
    """Converts storage dicts (camelCase or snake_case) to items and back."""

    def __init__(self, normalizer: StatusNormalizer | None = None) -> None:
        self._normalizer = normalizer or StatusNormalizer()

    @staticmethod
    def normalize_kind(raw: str | ItemKind) -> ItemKind:
        if isinstance(raw, ItemKind):
            return raw
        try:
            return _KIND_ALIASES[fold(raw)]
        except KeyError:
            raise ValueError(f"Unknown governance item kind {raw!r}.") from None

    def to_item(self, record: dict[str, Any]) -> GovernanceItem:
        known = GovernanceItem.model_fields
        fields: dict[str, Any] = {}
        for key, value in record.items():
            name = _field_name(key)
            if name not in known:
                logger.debug("Ignoring unmapped record field %r", key)
                continue
            fields[name] = value

        if "kind" in fields:
            fields["kind"] = self.normalize_kind(fields["kind"])
        if fields.get("approval_status") is not None:
            fields["approval_status"] = self._normalizer.normalize(fields["approval_status"])
        else:
            fields.pop("approval_status", None)

        return GovernanceItem(**fields)

    def to_record(self, item: GovernanceItem) -> dict[str, Any]:
        record = item.model_dump(mode="json")
        record["approval_status"] = self._normalizer.to_storage(item.approval_status)
        return record
