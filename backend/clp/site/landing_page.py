# clp/site/landing_page.py
from flask import abort, current_app, g, redirect, request
from clp.application.landing_pages.release import active_release
from clp.domain import routing
from clp.errors import VersionNotFound
from clp.extensions import landing_page_cache
from . import site_bp
from .fallback import homepage_index


@site_bp.route(routing.ROOT_PATH, methods=["GET"])
@site_bp.route(routing.SEARCH_PATH, methods=["GET"])
@site_bp.route(routing.PREVIEW_PATH, methods=["GET"])
def dispatch():
    tenant = g.current_tenant

    decision = routing.resolve_route(
        path=request.path,
        args=request.args,
        released_version=active_release(tenant_id=tenant.id),
    )
    current_app.logger.debug(
        "Tenant %s %s -> %s", tenant.id, request.full_path, decision
    )

    if decision.kind == routing.LANDING_PAGE:
        return landing_page_cache.serve(
            tenant.id,
            decision.version,
            request.headers,
            locale=request.args.get("locale"),
        )

    if decision.kind == routing.PREVIEW:
        if decision.version is None:
            raise VersionNotFound(tenant.id, request.args.get(routing.PREVIEW_VERSION_PARAM))
        return landing_page_cache.serve(
            tenant.id,
            decision.version,
            request.headers,
            locale=request.args.get("locale"),
            preview=True,
        )

    if decision.kind == routing.FALLBACK_HOMEPAGE:
        return homepage_index()

    if decision.kind == routing.FALLBACK_SEARCH:
        return homepage_index(search=True)

    if decision.kind == routing.REDIRECT:
        return redirect(request.host_url.rstrip("/") + decision.location, code=307)

    abort(404)
