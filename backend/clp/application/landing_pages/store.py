# clp/application/landing_pages/store.py
import json
import logging
from typing import Any, Dict, List
from sqlalchemy.exc import IntegrityError
from clp.errors import DuplicateVersion, VersionNotFound
from clp.models.landing_page import LandingPage
from clp.models.landing_page_version import LandingPageVersion
from clp.domain.invariants.document import (
    assert_version_number,
    is_version_number,
    parse_document,
)
from clp.utils.audit import log_action, current_actor_id
from clp.utils.transaction import transactional

logger = logging.getLogger(__name__)


def create_version(
    *,
    tenant_id: str,
    version: int,
    content: Any,
) -> LandingPageVersion:
    """
    Store an immutable landing page document under an explicit version number.

    Edge cases handled:
    - Version numbers need not be contiguous, only unique per tenant
    - Duplicate (tenant, version), checked up front and by the unique constraint
    - Structurally malformed documents
    """
    assert_version_number(version)
    document = parse_document(content)

    existing = LandingPageVersion.query.filter_by(
        tenant_id=tenant_id,
        version=version,
    ).first()
    if existing:
        raise DuplicateVersion(tenant_id, version)

    lpv = LandingPageVersion()
    lpv.tenant_id = tenant_id
    lpv.version = version
    lpv.content = json.dumps(document, separators=(",", ":"))
    lpv.created_by = current_actor_id()

    try:
        with transactional() as session:
            session.add(lpv)
            session.flush()

            log_action(
                tenant_id=tenant_id,
                action="landing_page.version.create",
                entity_id=version,
                payload={"sections": len(document["sections"])},
            )
    except IntegrityError as exc:
        # A concurrent writer won the race for this version number
        raise DuplicateVersion(tenant_id, version) from exc

    logger.info("Created landing page version %s for tenant %s", version, tenant_id)
    return lpv


def get_version(*, tenant_id: str, version: int) -> LandingPageVersion:
    # Out-of-range numbers cannot be stored, so they cannot exist
    if not is_version_number(version):
        raise VersionNotFound(tenant_id, version)

    lpv = LandingPageVersion.query.filter_by(
        tenant_id=tenant_id,
        version=version,
    ).first()

    if lpv is None:
        raise VersionNotFound(tenant_id, version)
    return lpv


def load_document(*, tenant_id: str, version: int) -> Dict[str, Any]:
    """Decoded document of a stored version."""
    return json.loads(get_version(tenant_id=tenant_id, version=version).content)


def list_versions(*, tenant_id: str) -> List[LandingPageVersion]:
    return (
        LandingPageVersion.query
        .filter_by(tenant_id=tenant_id)
        .order_by(LandingPageVersion.version.desc())
        .all()
    )


def delete_landing_page_data(*, tenant_id: str) -> int:
    """
    Tenant-data teardown: remove every version and the release pointer.

    Returns the number of versions deleted.
    """
    with transactional():
        LandingPage.query.filter_by(
            tenant_id=tenant_id,
        ).delete(synchronize_session=False)

        deleted = LandingPageVersion.query.filter_by(
            tenant_id=tenant_id,
        ).delete(synchronize_session=False)

        log_action(
            tenant_id=tenant_id,
            action="landing_page.delete",
            entity_id=None,
            payload={"versions": deleted},
        )

    logger.info("Deleted %s landing page versions for tenant %s", deleted, tenant_id)
    return deleted
