from clp.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class LandingPageVersion(BaseModel, TenantMixin):
    __tablename__ = "landing_page_versions"

    version = db.Column(db.Integer, nullable=False)

    # Serialized JSON document, never rewritten after insert
    content = db.Column(db.Text, nullable=False)

    created_by = db.Column(db.String(36), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "version", name="uq_landing_page_version"),
        db.Index("idx_landing_page_version_tenant", "tenant_id", "version"),
    )
