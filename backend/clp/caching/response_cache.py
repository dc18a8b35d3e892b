"""
Server-side cache and conditional-request handling for landing pages.

Two layers sit in front of the renderer:

- TTLCache: a process-local map of rendered pages. Entries older than the
  TTL are treated as absent on read (lazy expiration); the map is bounded
  and drops the oldest insert when full.
- LandingPageCache.serve: computes the body, ETag and Last-Modified for a
  (tenant, version, locale) and answers 304 when the request's
  If-None-Match / If-Modified-Since says the client copy is current.

Released pages go through the TTL cache and report it in X-CLP-Cache
("1" hit, "0" miss). Previews always render fresh and carry no
diagnostic header. Nothing is cached when rendering fails.
"""
import hashlib
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Hashable, Mapping, Optional
from flask import Response
from werkzeug.http import parse_etags
from clp.errors import InvalidConditionalHeader
from clp.utils.http_dates import parse_header_date, to_http_precision

logger = logging.getLogger(__name__)

CACHE_HEADER = "X-CLP-Cache"

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    body: bytes
    etag: str
    last_modified: datetime
    inserted_at: float


class TTLCache:
    def __init__(self, ttl: float = 60, *, max_entries: int = 1024, clock: Clock = time.time):
        self.ttl = ttl
        self.max_entries = max_entries
        self.clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.inserted_at < self.ttl

    def get(self, key: Hashable) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self.is_fresh(entry):
                del self._entries[key]
                return None
            return entry

    def set(self, key: Hashable, body: bytes, etag: str, last_modified: datetime) -> CacheEntry:
        entry = CacheEntry(
            body=body,
            etag=etag,
            last_modified=last_modified,
            inserted_at=self.clock(),
        )
        with self._lock:
            # Last write wins for concurrent misses on the same key
            self._entries.pop(key, None)
            self._entries[key] = entry
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def content_etag(body: bytes) -> str:
    return hashlib.md5(body).hexdigest()


def etag_matches(header: Optional[str], etag: str) -> bool:
    if not header:
        return False
    return parse_etags(header).contains_weak(etag)


def not_modified_since(header: Optional[str], last_modified: datetime) -> bool:
    """
    True when If-Modified-Since is at or after last_modified.
    A malformed header counts as absent.
    """
    if not header:
        return False
    try:
        since = parse_header_date(header)
    except InvalidConditionalHeader:
        logger.debug("Ignoring malformed If-Modified-Since %r", header)
        return False
    return since >= last_modified


class LandingPageCache:
    """
    Flask extension serving rendered landing pages.

    renderer(tenant_id=, version=, locale=, released=) must return an object
    with ``body`` (bytes) and ``last_modified`` (datetime). It defaults to
    clp.rendering.landing_page.render_landing_page.
    """

    def __init__(self, app=None, *, renderer=None, clock: Clock = time.time):
        self.renderer = renderer
        self.clock = clock
        self.cache = TTLCache(clock=clock)
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.cache = TTLCache(
            ttl=app.config.get("CLP_CACHE_TIME", 60),
            max_entries=app.config.get("CLP_CACHE_MAX_ENTRIES", 1024),
            clock=self.clock,
        )
        app.extensions["clp_cache"] = self

    @property
    def ttl(self) -> float:
        return self.cache.ttl

    @ttl.setter
    def ttl(self, value: float) -> None:
        self.cache.ttl = value

    def set_clock(self, clock: Clock) -> None:
        self.clock = clock
        self.cache.clock = clock

    def clear(self) -> None:
        self.cache.clear()
        logger.info("Landing page cache cleared")

    def _render(self, tenant_id, version, locale, released):
        renderer = self.renderer
        if renderer is None:
            from clp.rendering.landing_page import render_landing_page
            renderer = render_landing_page

        page = renderer(
            tenant_id=tenant_id,
            version=version,
            locale=locale,
            released=released,
        )
        return page.body, to_http_precision(page.last_modified)

    def _lookup(self, tenant_id, version, locale):
        """Cached entry for the released page, rendering on a miss."""
        key = (tenant_id, version, locale)
        entry = self.cache.get(key)
        if entry is not None:
            logger.debug("Landing page cache hit for %s", key)
            return entry, True

        logger.debug("Landing page cache miss for %s", key)
        body, last_modified = self._render(tenant_id, version, locale, True)
        entry = self.cache.set(key, body, content_etag(body), last_modified)
        return entry, False

    def serve(
        self,
        tenant_id: str,
        version: int,
        request_headers: Mapping[str, str],
        *,
        locale: Optional[str] = None,
        preview: bool = False,
    ) -> Response:
        if preview:
            body, last_modified = self._render(tenant_id, version, locale, False)
            etag = content_etag(body)
            cache_hit = None
        else:
            entry, cache_hit = self._lookup(tenant_id, version, locale)
            body, etag, last_modified = entry.body, entry.etag, entry.last_modified

        if etag_matches(request_headers.get("If-None-Match"), etag) or not_modified_since(
            request_headers.get("If-Modified-Since"), last_modified
        ):
            response = Response(status=304)
        else:
            response = Response(body, status=200, mimetype="text/html")
            if cache_hit is not None:
                response.headers[CACHE_HEADER] = "1" if cache_hit else "0"

        response.set_etag(etag)
        response.last_modified = last_modified

        if preview:
            response.cache_control.no_cache = True
        else:
            response.cache_control.public = True
            response.cache_control.max_age = int(self.ttl)
            response.expires = datetime.now(timezone.utc) + timedelta(seconds=self.ttl)

        return response
