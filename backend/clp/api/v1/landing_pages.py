# clp/api/v1/landing_pages.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from clp.application.landing_pages import release, store
from clp.domain.invariants.exceptions import InvariantViolation
from clp.extensions import landing_page_cache
from clp.models.audit_log import AuditLog
from clp.models.landing_page import LandingPage
from clp.normalizers.audit import normalize_audit_log
from clp.normalizers.landing_page import normalize_landing_page, normalize_version
from clp.utils.audit import log_action
from clp.utils.decorators import tenant_required, roles_required
from clp.utils.transaction import transactional
from . import v1_bp

# ------------------------
# Landing page
# ------------------------

@v1_bp.route("/landing_page", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
def get_landing_page():
    tenant = g.current_tenant
    landing_page = LandingPage.query.filter_by(tenant_id=tenant.id).first()

    return jsonify(normalize_landing_page(landing_page))


@v1_bp.route("/landing_page", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
def create_landing_page():
    tenant = g.current_tenant
    landing_page = release.create_landing_page(tenant_id=tenant.id)

    return jsonify(normalize_landing_page(landing_page)), 201


@v1_bp.route("/landing_page", methods=["PATCH"])
@jwt_required()
@tenant_required
@roles_required("admin")
def update_landing_page():
    tenant = g.current_tenant
    data = request.get_json(silent=True) or {}

    if not isinstance(data.get("enabled"), bool):
        return jsonify({"error": "'enabled' must be a boolean"}), 400

    landing_page = release.set_enabled(tenant_id=tenant.id, enabled=data["enabled"])

    return jsonify(normalize_landing_page(landing_page))


@v1_bp.route("/landing_page", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required("admin")
def delete_landing_page():
    tenant = g.current_tenant
    deleted = store.delete_landing_page_data(tenant_id=tenant.id)

    return jsonify({"message": "Landing page deleted", "deleted_versions": deleted}), 200

# ------------------------
# Versions
# ------------------------

@v1_bp.route("/landing_page/versions", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
def list_versions():
    tenant = g.current_tenant
    released = release.current_release(tenant_id=tenant.id)

    return jsonify({
        "released_version": released,
        "items": [normalize_version(v) for v in store.list_versions(tenant_id=tenant.id)],
    })


@v1_bp.route("/landing_page/versions", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
def create_version():
    tenant = g.current_tenant
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or "version" not in data or "content" not in data:
        raise InvariantViolation("Both 'version' and 'content' are required")

    lpv = store.create_version(
        tenant_id=tenant.id,
        version=data["version"],
        content=data["content"],
    )

    return jsonify(normalize_version(lpv)), 201


@v1_bp.route("/landing_page/versions/<int:version>", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
def get_version(version):
    tenant = g.current_tenant
    lpv = store.get_version(tenant_id=tenant.id, version=version)

    return jsonify(normalize_version(lpv, include_content=True))


@v1_bp.route("/landing_page/release/<int:version>", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
def release_version(version):
    tenant = g.current_tenant
    landing_page = release.release_version(tenant_id=tenant.id, version=version)

    return jsonify(normalize_landing_page(landing_page)), 200

# ------------------------
# Cache & audit
# ------------------------

@v1_bp.route("/landing_page/cache/clear", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
def clear_cache():
    # The server cache is process-wide, not per tenant
    tenant = g.current_tenant
    landing_page_cache.clear()

    with transactional():
        log_action(
            tenant_id=tenant.id,
            action="landing_page.cache.clear",
            entity_id=None,
        )

    return jsonify({"message": "Landing page cache cleared"}), 200


@v1_bp.route("/landing_page/audit", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required("admin")
def list_audit_logs():
    tenant = g.current_tenant
    limit = min(request.args.get("limit", 20, type=int), 100)

    query = AuditLog.query.filter(AuditLog.tenant_id == tenant.id)

    if action := request.args.get("action"):
        query = query.filter(AuditLog.action == action)

    logs = (
        query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .all()
    )

    return jsonify({"items": [normalize_audit_log(log) for log in logs]}), 200
