from flask.testing import FlaskClient

from clp.extensions import db
from clp.models.tenant import Tenant

from factories import DOMAIN


def test_unknown_domain_is_not_found(client: FlaskClient, tenant: Tenant) -> None:
    response = client.get("/", base_url="http://unknown.example.org")

    assert response.status_code == 404
    assert response.get_json() == {"error": "Unknown tenant"}


def test_domain_with_port_resolves(client: FlaskClient, tenant: Tenant) -> None:
    response = client.get("/", base_url=f"http://{DOMAIN}:8080")

    assert response.status_code == 200


def test_domain_ignored_unless_enabled(client: FlaskClient, tenant: Tenant) -> None:
    tenant.use_domain = False
    db.session.commit()

    assert client.get("/", base_url=f"http://{DOMAIN}").status_code == 404


def test_inactive_tenant_is_not_served(client: FlaskClient, tenant: Tenant) -> None:
    tenant.is_active = False
    db.session.commit()

    assert client.get("/", base_url=f"http://{DOMAIN}").status_code == 404


def test_tenant_header_fallback(client: FlaskClient, tenant: Tenant) -> None:
    response = client.get("/", headers={"X-Tenant-ID": tenant.id})

    assert response.status_code == 200
    assert b'data-view="homepage-index"' in response.data


def test_public_endpoints_need_no_tenant(client: FlaskClient) -> None:
    health = client.get("/api/v1/health")
    assert health.status_code == 200
    assert health.get_json()["status"] == "ok"

    document = client.get("/openapi/landing_page.yaml")
    assert document.status_code == 200
    assert b"openapi: 3.0.3" in document.data
    document.close()


def test_swagger_ui_needs_no_tenant(client: FlaskClient) -> None:
    response = client.get("/swagger/")

    assert response.status_code == 200
    assert b"/openapi/landing_page.yaml" in response.data
