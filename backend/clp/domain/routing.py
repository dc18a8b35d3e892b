"""
Request routing for a tenant's public site.

resolve_route is a pure function of the request path, its query
arguments and the tenant's release pointer (None when nothing is
released). It never touches the store; the caller turns the decision
into a response.
"""
from dataclasses import dataclass
from typing import Mapping, Optional
from clp.domain.invariants.document import is_version_number

ROOT_PATH = "/"
SEARCH_PATH = "/s"
PREVIEW_PATH = "/_lp_preview"
PREVIEW_VERSION_PARAM = "preview_version"

LANDING_PAGE = "landing_page"
PREVIEW = "preview"
FALLBACK_HOMEPAGE = "fallback_homepage"
FALLBACK_SEARCH = "fallback_search"
REDIRECT = "redirect"
NOT_ROUTED = "not_routed"


@dataclass(frozen=True)
class RouteDecision:
    kind: str
    version: Optional[int] = None
    location: Optional[str] = None


def parse_version_param(raw: Optional[str]) -> Optional[int]:
    """
    Plain ASCII decimal digits naming a storable version, or None.

    int() alone would also take signs, underscores and non-ASCII digits.
    """
    if raw is None:
        return None
    raw = raw.strip()
    if not (raw.isascii() and raw.isdecimal()):
        return None
    value = int(raw)
    return value if is_version_number(value) else None


def _normalize_path(path: str) -> str:
    if len(path) > 1:
        path = path.rstrip("/")
    return path or ROOT_PATH


def resolve_route(
    *,
    path: str,
    args: Mapping[str, str],
    released_version: Optional[int],
) -> RouteDecision:
    path = _normalize_path(path)
    has_release = released_version is not None

    # Preview ignores release state entirely
    if path == PREVIEW_PATH:
        return RouteDecision(
            PREVIEW,
            version=parse_version_param(args.get(PREVIEW_VERSION_PARAM)),
        )

    if path == SEARCH_PATH:
        if has_release:
            return RouteDecision(FALLBACK_SEARCH)
        return RouteDecision(REDIRECT, location=ROOT_PATH)

    if path == ROOT_PATH:
        if has_release:
            return RouteDecision(LANDING_PAGE, version=released_version)
        return RouteDecision(FALLBACK_HOMEPAGE)

    return RouteDecision(NOT_ROUTED)
