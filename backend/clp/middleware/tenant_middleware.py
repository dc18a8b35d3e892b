from flask import request, g, jsonify
from clp.models.tenant import Tenant

# Served without a tenant
PUBLIC_ENDPOINTS = {"v1.health_check", "openapi_landing_page", "static"}
PUBLIC_BLUEPRINTS = {"swagger_ui"}


def resolve_tenant():
    """
    Resolve the request's tenant from its custom domain, falling back to
    the X-Tenant-ID header used by the admin API.
    """
    tenant = Tenant.for_host(request.host)
    if tenant:
        return tenant

    tenant_id = request.headers.get('X-Tenant-ID')
    if not tenant_id:
        return None

    return Tenant.query.filter_by(id=tenant_id, is_active=True).first()


def tenant_middleware(app):
    @app.before_request
    def load_tenant():
        if request.endpoint in PUBLIC_ENDPOINTS or request.blueprint in PUBLIC_BLUEPRINTS:
            return None

        tenant = resolve_tenant()
        if not tenant:
            return jsonify({"error": "Unknown tenant"}), 404

        # Attach tenant to global context
        g.current_tenant = tenant
