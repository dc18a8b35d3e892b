from typing import Optional
from flask import has_request_context
from flask_jwt_extended import get_jwt_identity
from clp.extensions import db
from clp.models.audit_log import AuditLog

SYSTEM_ACTOR = "system"


def current_actor_id() -> str:
    """
    Identity of the verified JWT in the current request, or the system
    actor when the action runs outside an authenticated request.
    """
    if not has_request_context():
        return SYSTEM_ACTOR
    try:
        return get_jwt_identity() or SYSTEM_ACTOR
    except RuntimeError:
        # No token was verified for this request
        return SYSTEM_ACTOR


def log_action(
    *,
    tenant_id: str,
    action: str,
    entity_id: Optional[str],
    payload: dict | None = None
):
    log = AuditLog()

    log.actor_id = current_actor_id()
    log.tenant_id = tenant_id
    log.action = action
    log.entity_id = "*" if entity_id is None else str(entity_id)
    log.payload = payload or {}

    db.session.add(log)
