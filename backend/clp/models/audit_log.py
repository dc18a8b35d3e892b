# clp/models/audit_log.py
from clp.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin
from sqlalchemy import event


class AuditLog(BaseModel, TenantMixin):
    """Append-only record of authoring actions on a tenant's landing page."""

    __tablename__ = "audit_logs"

    __table_args__ = (
        db.Index("ix_audit_tenant_created", "tenant_id", "created_at", "id"),
        db.Index("ix_audit_tenant_action", "tenant_id", "action"),
    )

    actor_id = db.Column(db.String(36), nullable=False, index=True)
    action = db.Column(db.String(50), nullable=False, index=True)

    # Version number for version-level actions, "*" for landing-page-wide ones
    entity_id = db.Column(db.String(36), nullable=False)

    payload = db.Column(db.JSON, nullable=False, default=dict)

@event.listens_for(AuditLog, 'before_update')
@event.listens_for(AuditLog, 'before_delete')
def prevent_audit_mutation(mapper, connection, target):
    raise RuntimeError("Audit logs are immutable")
