from clp.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class LandingPage(BaseModel, TenantMixin):
    """
    Per-tenant release pointer.

    released_version is either None or the number of an existing
    LandingPageVersion of the same tenant.
    """

    __tablename__ = "landing_pages"

    enabled = db.Column(db.Boolean, nullable=False, default=True)
    released_version = db.Column(db.Integer, nullable=True)
    released_at = db.Column(db.DateTime(timezone=True), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", name="uq_landing_page_tenant"),
    )
