from flask import current_app, jsonify
from clp.domain.invariants.exceptions import InvariantViolation


class LandingPageError(Exception):
    """Base class for landing page failures surfaced to the HTTP layer."""

    status_code = 500


class DuplicateVersion(LandingPageError):
    status_code = 409

    def __init__(self, tenant_id, version):
        super().__init__(f"Version {version} already exists for tenant {tenant_id}")
        self.tenant_id = tenant_id
        self.version = version


class VersionNotFound(LandingPageError):
    status_code = 404

    def __init__(self, tenant_id, version):
        super().__init__(f"Version {version} not found for tenant {tenant_id}")
        self.tenant_id = tenant_id
        self.version = version


class RenderError(LandingPageError):
    """The stored document cannot be turned into a page."""

    status_code = 500


class InvalidConditionalHeader(LandingPageError):
    """Malformed If-Modified-Since. Callers treat the header as absent."""

    status_code = 400


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "error": "InvariantViolation",
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(DuplicateVersion)
    @app.errorhandler(VersionNotFound)
    def handle_version_error(error):
        response = jsonify({
            "error": type(error).__name__,
            "message": str(error)
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(RenderError)
    def handle_render_error(error):
        current_app.logger.error("Landing page render failed: %s", error, exc_info=error)
        response = jsonify({
            "error": "RenderError",
            "message": "The page could not be rendered"
        })
        response.status_code = 500
        return response


def register_jwt_handlers(jwt):
    """Answer every rejected admin token with a JSON 401."""

    def unauthorized(reason):
        return jsonify({"error": "Unauthorized", "message": reason}), 401

    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return unauthorized(reason)

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return unauthorized(f"Invalid token: {reason}")

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return unauthorized("Token has expired")
