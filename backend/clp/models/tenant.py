from clp.extensions import db
from .base import BaseModel

class Tenant(BaseModel):
    """A community: owns landing page versions and is served on its own domain."""

    __tablename__ = "tenants"

    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True)

    # Custom domain, only used for routing when use_domain is set
    domain = db.Column(db.String(255), unique=True, nullable=True, index=True)
    use_domain = db.Column(db.Boolean, default=False)

    @classmethod
    def for_host(cls, host: str):
        """
        Resolve an active tenant from a request host (port ignored).
        """
        hostname = host.split(":", 1)[0].lower()
        return cls.query.filter_by(
            domain=hostname,
            use_domain=True,
            is_active=True,
        ).first()
