"""
Audit Models for Marketing Budget

Every write to reference or budget data produces one audit entry:
who did it, to what, when, and what changed.

DESIGN DECISION: Audit entries are append-only. Once logged they are
frozen; nothing in the engine edits an entry after the fact.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from marketing_budget.models.catalogue import utcnow


class AuditEntityType(str, Enum):
    """Entity kinds that can be audited."""
    BUDGET = "budget"
    VENDOR = "vendor"
    SERVICE = "service"
    SUBURB = "suburb"
    SCHEDULE = "schedule"


class AuditAction(str, Enum):
    """What happened. Every mutating call maps to exactly one of these."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS_CHANGE = "statusChange"
    SEED = "seed"
    IMPORT = "import"


class FieldChange(BaseModel):
    """
    A single field-level change, formatted for display.

    from/to are display strings, not the original values.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str
    from_: str = Field(..., alias="from")
    to: str


class AuditEntry(BaseModel):
    """
    A single audit log entry.

    before/after are JSON-ready snapshots of the entity. before is None
    for create, seed and import; both are None for delete.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(
        default=None,
        description="Assigned by the audit sink when the entry is stored"
    )
    timestamp: datetime = Field(default_factory=utcnow)
    user: str = Field(..., min_length=1)
    entity_type: AuditEntityType
    entity_id: Optional[int] = None
    entity_label: str
    action: AuditAction
    summary: str
    before: Optional[dict[str, Any]] = None
    after: Optional[dict[str, Any]] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.

        Snapshots are left out; they can be large.
        """
        return {
            "audit_id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "user": self.user,
            "entity_type": self.entity_type.value,
            "entity_id": self.entity_id,
            "entity_label": self.entity_label,
            "action": self.action.value,
            "summary": self.summary,
        }


def describe_entity(entity_type: AuditEntityType, label: str) -> str:
    """Human phrase for an entity, e.g. 'vendor "Acme"' or 'budget for "1 Main St"'."""
    if entity_type == AuditEntityType.BUDGET:
        return f'budget for "{label}"'
    return f'{entity_type.value} "{label}"'


class AuditEntryBuilder:
    """
    Helper class to build audit entries with common patterns.

    Usage:
        entry = AuditEntryBuilder.created(AuditEntityType.VENDOR, 3, "Acme", "jdoe", after)
        entry = AuditEntryBuilder.deleted(AuditEntityType.BUDGET, 9, "1 Main St", "jdoe")
    """

    @staticmethod
    def created(
        entity_type: AuditEntityType,
        entity_id: Optional[int],
        entity_label: str,
        user: str,
        after: Optional[dict[str, Any]],
    ) -> AuditEntry:
        return AuditEntry(
            user=user,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_label=entity_label,
            action=AuditAction.CREATE,
            summary=f"Created {describe_entity(entity_type, entity_label)}",
            after=after,
        )

    @staticmethod
    def updated(
        entity_type: AuditEntityType,
        entity_id: Optional[int],
        entity_label: str,
        user: str,
        summary: str,
        before: Optional[dict[str, Any]],
        after: Optional[dict[str, Any]],
    ) -> AuditEntry:
        return AuditEntry(
            user=user,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_label=entity_label,
            action=AuditAction.UPDATE,
            summary=summary,
            before=before,
            after=after,
        )

    @staticmethod
    def status_changed(
        entity_id: Optional[int],
        entity_label: str,
        user: str,
        from_status: str,
        to_status: str,
        before: Optional[dict[str, Any]],
        after: Optional[dict[str, Any]],
    ) -> AuditEntry:
        return AuditEntry(
            user=user,
            entity_type=AuditEntityType.BUDGET,
            entity_id=entity_id,
            entity_label=entity_label,
            action=AuditAction.STATUS_CHANGE,
            summary=f'Status changed from "{from_status}" to "{to_status}"',
            before=before,
            after=after,
        )

    @staticmethod
    def deleted(
        entity_type: AuditEntityType,
        entity_id: int,
        entity_label: Optional[str],
        user: str,
    ) -> AuditEntry:
        label = entity_label or f"#{entity_id}"
        return AuditEntry(
            user=user,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_label=label,
            action=AuditAction.DELETE,
            summary=f"Deleted {describe_entity(entity_type, label)}",
        )

    @staticmethod
    def seeded(user: str, counts: dict[str, int]) -> AuditEntry:
        return AuditEntry(
            user=user,
            entity_type=AuditEntityType.BUDGET,
            entity_label="Seed data",
            action=AuditAction.SEED,
            summary=f"Reference data seeded: {_format_counts(counts)}",
        )

    @staticmethod
    def imported(user: str, counts: dict[str, int]) -> AuditEntry:
        return AuditEntry(
            user=user,
            entity_type=AuditEntityType.BUDGET,
            entity_label="Full import",
            action=AuditAction.IMPORT,
            summary=f"Imported {_format_counts(counts)}",
        )


def _format_counts(counts: dict[str, int]) -> str:
    if not counts:
        return "nothing"
    return ", ".join(f"{count} {kind}" for kind, count in counts.items())
