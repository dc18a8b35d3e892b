# clp/application/landing_pages/release.py
import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from clp.extensions import db
from clp.models.base import utc_now
from clp.models.landing_page import LandingPage
from clp.application.landing_pages.store import get_version
from clp.utils.audit import log_action
from clp.utils.transaction import transactional

logger = logging.getLogger(__name__)


def _locked_landing_page(tenant_id: str) -> Optional[LandingPage]:
    return (
        db.session.execute(
            select(LandingPage)
            .where(LandingPage.tenant_id == tenant_id)
            .with_for_update()
        )
        .scalar_one_or_none()
    )


def create_landing_page(*, tenant_id: str, enabled: bool = True) -> LandingPage:
    """
    Create the tenant's landing page row with no release.

    Idempotent: an existing row is returned untouched.
    """
    existing = LandingPage.query.filter_by(tenant_id=tenant_id).first()
    if existing:
        return existing

    landing_page = LandingPage()
    landing_page.tenant_id = tenant_id
    landing_page.enabled = enabled

    try:
        with transactional() as session:
            session.add(landing_page)
            session.flush()

            log_action(
                tenant_id=tenant_id,
                action="landing_page.create",
                entity_id=None,
                payload={"enabled": enabled},
            )
    except IntegrityError:
        # Lost a creation race; the winner's row is the landing page
        return LandingPage.query.filter_by(tenant_id=tenant_id).one()

    return landing_page


def release_version(*, tenant_id: str, version: int) -> LandingPage:
    """
    Point the tenant's release at an existing version.

    Responsibilities:
    - Reject unknown versions before any state changes
    - Serialize concurrent releases of one tenant with a row-level lock
    - Leave state untouched when the version is already released
    - Audit logging

    The TTL response cache is not invalidated; a new release becomes
    visible once cached pages expire or the cache is cleared.
    """
    get_version(tenant_id=tenant_id, version=version)

    if LandingPage.query.filter_by(tenant_id=tenant_id).first() is None:
        create_landing_page(tenant_id=tenant_id)

    with transactional():
        landing_page = _locked_landing_page(tenant_id)

        previous = landing_page.released_version
        if previous == version:
            return landing_page

        landing_page.released_version = version
        landing_page.released_at = utc_now()

        log_action(
            tenant_id=tenant_id,
            action="landing_page.release",
            entity_id=version,
            payload={"previous_version": previous},
        )

    logger.info(
        "Released landing page version %s for tenant %s (was %s)",
        version, tenant_id, previous,
    )
    return landing_page


def current_release(*, tenant_id: str) -> Optional[int]:
    landing_page = LandingPage.query.filter_by(tenant_id=tenant_id).first()
    return landing_page.released_version if landing_page else None


def active_release(*, tenant_id: str) -> Optional[int]:
    """
    The version the public site should serve: the release pointer of an
    enabled landing page, otherwise None.
    """
    landing_page = LandingPage.query.filter_by(tenant_id=tenant_id).first()
    if landing_page is None or not landing_page.enabled:
        return None
    return landing_page.released_version


def has_release(*, tenant_id: str) -> bool:
    return active_release(tenant_id=tenant_id) is not None


def set_enabled(*, tenant_id: str, enabled: bool) -> LandingPage:
    """Switch the public landing page on or off without touching the release."""
    create_landing_page(tenant_id=tenant_id)

    with transactional():
        landing_page = _locked_landing_page(tenant_id)
        if landing_page.enabled != enabled:
            landing_page.enabled = enabled

            log_action(
                tenant_id=tenant_id,
                action="landing_page.enable" if enabled else "landing_page.disable",
                entity_id=None,
            )

    return landing_page
