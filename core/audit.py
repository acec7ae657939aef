"""
Audit trail for all entity changes.

Every mutation to a company, invoice or note is recorded here. The audit log
is append-only and captures old and new values. Entries are always emitted
on the `core.audit` logger; they are also persisted to the audit_log table
when a PostgresClient is configured.
"""

import logging
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class AuditAction(Enum):
    """Type of change made to an entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Compute changes between two entity states.

    Args:
        old: Previous state of entity
        new: New state of entity
        exclude_fields: Fields to ignore (defaults to {"updated_at"})

    Returns:
        Dict of {field: {"old": old_val, "new": new_val}} for changed fields.
        Empty dict if no changes.
    """
    exclude = exclude_fields or {"updated_at"}
    changes = {}

    all_keys = set(old.keys()) | set(new.keys())
    for key in all_keys:
        if key in exclude:
            continue

        old_val = old.get(key)
        new_val = new.get(key)

        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}

    return changes


class AuditLogger:
    """
    Audit trail for entity changes.

    IMPORTANT: Always use model_dump(mode="json") when passing Pydantic models
    so UUIDs, Decimals and datetimes are JSON-compatible.

    Usage:
        audit = AuditLogger(postgres)

        audit.log_change(
            entity_type="invoice",
            entity_id=invoice.id,
            action=AuditAction.CREATE,
            changes={"created": invoice.model_dump(mode="json")}
        )

        changes = compute_changes(
            old.model_dump(mode="json"),
            new.model_dump(mode="json")
        )
        audit.log_change("invoice", invoice.id, AuditAction.UPDATE, changes)

        history = audit.get_entity_history("invoice", invoice.id)
    """

    def __init__(self, postgres: PostgresClient | None = None):
        self.postgres = postgres

    def log_change(
        self,
        entity_type: str,
        entity_id: UUID,
        action: AuditAction,
        changes: dict[str, Any]
    ) -> None:
        """
        Log an entity change.

        Args:
            entity_type: Type of entity ("company", "invoice", "note")
            entity_id: ID of the entity
            action: The action performed (CREATE, UPDATE, DELETE)
            changes: The changes made (format depends on action)

        Changes format by action:
        - CREATE: {"created": {full entity data}}
        - UPDATE: {"field": {"old": old_val, "new": new_val}, ...}
        - DELETE: {"deleted": {full entity data at deletion}}
        """
        logger.info(
            "audit %s %s %s fields=%s",
            action.value, entity_type, entity_id, sorted(changes.keys())
        )

        if self.postgres is None:
            return

        self.postgres.execute(
            """
            INSERT INTO audit_log (id, entity_type, entity_id, action, changes, created_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            (
                uuid4(),
                entity_type,
                entity_id,
                action.value,
                Json(changes),
                now_utc()
            )
        )

    def get_entity_history(
        self,
        entity_type: str,
        entity_id: UUID
    ) -> list[dict[str, Any]]:
        """
        Get full audit history for an entity.

        Returns:
            List of audit entries, newest first. Empty without a database.
        """
        if self.postgres is None:
            return []

        return self.postgres.execute(
            """
            SELECT id, entity_type, entity_id, action, changes, created_at
            FROM audit_log
            WHERE entity_type = %s AND entity_id = %s
            ORDER BY created_at DESC
            """,
            (entity_type, entity_id)
        )
