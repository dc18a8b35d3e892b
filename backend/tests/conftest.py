import pytest
from typing import Callable, Dict, Generator
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

from clp import create_app
from clp.extensions import db, landing_page_cache
from clp.models.tenant import Tenant

from factories import DOMAIN, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app(clock: FakeClock) -> Generator[Flask, None, None]:
    """Application on the testing config with a fresh in-memory database."""
    app = create_app("testing")
    landing_page_cache.set_clock(clock)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def tenant(app: Flask) -> Tenant:
    tenant = Tenant(
        name="Custom Market",
        slug="custom-market",
        domain=DOMAIN,
        use_domain=True,
    )
    db.session.add(tenant)
    db.session.commit()
    return tenant


@pytest.fixture
def other_tenant(app: Flask) -> Tenant:
    tenant = Tenant(
        name="Other Market",
        slug="other-market",
        domain="other.example.com",
        use_domain=True,
    )
    db.session.add(tenant)
    db.session.commit()
    return tenant


@pytest.fixture
def site(client: FlaskClient) -> Callable:
    """GET against the tenant's custom domain."""

    def get(path: str, headers: Dict[str, str] | None = None):
        return client.get(path, base_url=f"http://{DOMAIN}", headers=headers or {})

    return get


@pytest.fixture
def admin_headers(tenant: Tenant) -> Dict[str, str]:
    token = create_access_token(
        identity="admin-user",
        additional_claims={"tenant_id": tenant.id, "role": "admin"},
    )
    return {
        "Authorization": f"Bearer {token}",
        "X-Tenant-ID": tenant.id,
    }
