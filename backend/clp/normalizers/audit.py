# clp/normalizers/audit.py
from __future__ import annotations

from typing import Dict, Any
from clp.models.audit_log import AuditLog


def normalize_audit_log(log: AuditLog) -> Dict[str, Any]:
    """
    Normalizes an AuditLog model into API-safe JSON.

    entity_id is the version number for version actions, "*" otherwise.
    """
    return {
        "id": log.id,
        "tenant_id": log.tenant_id,
        "actor_id": log.actor_id,
        "action": log.action,
        "entity_id": log.entity_id,
        "payload": log.payload or {},
        "created_at": log.created_at.isoformat(),
    }
