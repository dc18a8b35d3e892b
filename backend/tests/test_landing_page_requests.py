"""
End-to-end behaviour of a tenant's public site: routing between the
fallback homepage and the landing page, previews and HTTP caching.
"""
from datetime import timedelta

import pytest
from dateutil.parser import parse

from clp.application.landing_pages.release import create_landing_page, release_version, set_enabled
from clp.application.landing_pages.store import create_version
from clp.caching.response_cache import CACHE_HEADER
from clp.extensions import landing_page_cache
from clp.models.tenant import Tenant

from factories import DOMAIN, FakeClock, sample_document


@pytest.fixture
def community(tenant: Tenant) -> Tenant:
    create_version(tenant_id=tenant.id, version=1, content=sample_document(1))
    create_version(tenant_id=tenant.id, version=2, content=sample_document(2))
    create_landing_page(tenant_id=tenant.id)
    return tenant


@pytest.fixture
def released(community: Tenant) -> Tenant:
    release_version(tenant_id=community.id, version=1)
    return community


def is_homepage(response) -> bool:
    return b'data-view="homepage-index"' in response.data


class TestNotReleased:
    def test_index_routes_to_homepage(self, community, site) -> None:
        response = site("/")

        assert response.status_code == 200
        assert is_homepage(response)

    def test_search_path_redirects_to_homepage(self, community, site) -> None:
        response = site("/s")

        assert response.status_code == 307
        assert response.headers["Location"] == f"http://{DOMAIN}/"

    def test_renders_correct_preview(self, community, site) -> None:
        for version in (1, 2):
            response = site(f"/_lp_preview?preview_version={version}")

            assert response.status_code == 200
            assert f"<title>Title version {version}</title>".encode() in response.data
            assert CACHE_HEADER not in response.headers

    @pytest.mark.parametrize(
        "query",
        [
            "?preview_version=3",
            "?preview_version=abc",
            "",
            "?preview_version=99999999999999999999999",
            "?preview_version=%2B1",
            "?preview_version=1_0",
        ],
    )
    def test_preview_of_unknown_version_is_not_found(self, community, site, query) -> None:
        response = site(f"/_lp_preview{query}")

        assert response.status_code == 404
        assert response.get_json()["error"] == "VersionNotFound"


class TestReleased:
    def test_index_routes_to_landing_page(self, released, site) -> None:
        response = site("/")

        assert response.status_code == 200
        assert not is_homepage(response)
        assert b"<title>Title version 1</title>" in response.data

    def test_search_path_routes_to_search(self, released, site) -> None:
        response = site("/s")

        assert response.status_code == 200
        assert is_homepage(response)
        assert b'data-search="true"' in response.data

    def test_preview_ignores_release(self, released, site) -> None:
        response = site("/_lp_preview?preview_version=2")

        assert b"<title>Title version 2</title>" in response.data

    def test_new_version_is_served_after_release(self, released, site) -> None:
        assert b"<title>Title version 1</title>" in site("/").data

        release_version(tenant_id=released.id, version=2)

        response = site("/")
        assert b"<title>Title version 2</title>" in response.data
        assert b"Title version 1" not in response.data

    def test_disabled_landing_page_falls_back(self, released, site) -> None:
        set_enabled(tenant_id=released.id, enabled=False)

        assert is_homepage(site("/"))
        assert site("/s").status_code == 307

    def test_render_error_is_a_server_error(self, released, site) -> None:
        broken = sample_document(3)
        del broken["sections"][1]["categories"]
        create_version(tenant_id=released.id, version=3, content=broken)
        release_version(tenant_id=released.id, version=3)

        response = site("/")

        assert response.status_code == 500
        assert response.get_json() == {
            "error": "RenderError",
            "message": "The page could not be rendered",
        }
        assert len(landing_page_cache.cache) == 0


class TestCaching:
    @pytest.fixture(autouse=True)
    def primed(self, released, site):
        landing_page_cache.ttl = 60
        landing_page_cache.clear()
        self.first = site("/")

    def test_first_request_is_a_miss(self) -> None:
        assert self.first.status_code == 200
        assert self.first.headers[CACHE_HEADER] == "0"
        assert self.first.headers["Cache-Control"] in ("public, max-age=60", "max-age=60, public")

    def test_subsequent_requests_are_served_from_cache(self, site) -> None:
        response = site("/")

        assert response.headers[CACHE_HEADER] == "1"
        assert response.status_code == 200
        assert response.headers["ETag"] == self.first.headers["ETag"]

    def test_request_with_correct_etag_returns_not_modified(self, site) -> None:
        response = site("/", {"If-None-Match": self.first.headers["ETag"]})

        assert response.status_code == 304
        assert response.data == b""

    def test_request_with_incorrect_etag_returns_ok(self, site) -> None:
        # md5("foobar")
        response = site("/", {"If-None-Match": "14758f1afd44c09b7992073ccf00b43d"})

        assert response.status_code == 200

    def test_request_with_correct_last_modified_returns_not_modified(self, site) -> None:
        response = site("/", {"If-Modified-Since": self.first.headers["Last-Modified"]})

        assert response.status_code == 304

    def test_request_with_past_last_modified_returns_ok(self, site) -> None:
        past = parse(self.first.headers["Last-Modified"]) - timedelta(minutes=10)

        response = site("/", {"If-Modified-Since": str(past)})

        assert response.status_code == 200

    def test_request_with_future_timestamp_returns_not_modified(self, site) -> None:
        future = parse(self.first.headers["Last-Modified"]) + timedelta(minutes=10)

        response = site("/", {"If-Modified-Since": str(future)})

        assert response.status_code == 304

    @pytest.mark.parametrize("value", ["not-a-date", "2099", "Dec 2099", "2099-12-31", "Thu, 31 Dec 2099"])
    def test_malformed_if_modified_since_is_ignored(self, site, value) -> None:
        response = site("/", {"If-Modified-Since": value})

        assert response.status_code == 200
        assert response.headers[CACHE_HEADER] == "1"

    def test_expires_after_configured_time(self, site, clock: FakeClock) -> None:
        landing_page_cache.ttl = 5
        landing_page_cache.clear()

        response = site("/")
        assert response.status_code == 200
        assert response.headers[CACHE_HEADER] == "0"

        clock.advance(landing_page_cache.ttl + 1)

        response = site("/")
        assert response.status_code == 200
        assert response.headers[CACHE_HEADER] == "0"

    def test_preview_is_never_cached(self, site) -> None:
        for _ in range(2):
            response = site("/_lp_preview?preview_version=1")
            assert CACHE_HEADER not in response.headers
            assert "no-cache" in response.headers["Cache-Control"]


def test_release_switch_scenario(released, site, clock: FakeClock) -> None:
    landing_page_cache.ttl = 60
    landing_page_cache.clear()

    first = site("/")
    assert (first.status_code, first.headers[CACHE_HEADER]) == (200, "0")
    etag = first.headers["ETag"]

    second = site("/")
    assert (second.status_code, second.headers[CACHE_HEADER]) == (200, "1")
    assert second.headers["ETag"] == etag

    assert site("/", {"If-None-Match": etag}).status_code == 304

    release_version(tenant_id=released.id, version=2)
    landing_page_cache.clear()

    fourth = site("/")
    assert (fourth.status_code, fourth.headers[CACHE_HEADER]) == (200, "0")
    assert b"<title>Title version 2</title>" in fourth.data
    assert fourth.headers["ETag"] != etag
