from .tenant import Tenant
from .landing_page import LandingPage
from .landing_page_version import LandingPageVersion
from .audit_log import AuditLog

__all__ = ["Tenant", "LandingPage", "LandingPageVersion", "AuditLog"]
