# clp/normalizers/landing_page.py
import json
from typing import Any, Dict
from clp.models.landing_page import LandingPage
from clp.models.landing_page_version import LandingPageVersion


def _iso(ts):
    return ts.isoformat() if ts else None


def normalize_version(lpv: LandingPageVersion, include_content: bool = False) -> Dict[str, Any]:
    data = {
        "version": lpv.version,
        "created_at": _iso(lpv.created_at),
        "created_by": lpv.created_by,
    }

    if include_content:
        data["content"] = json.loads(lpv.content)

    return data


def normalize_landing_page(landing_page: LandingPage | None) -> Dict[str, Any]:
    """Status view; a tenant without a landing page row reads as never released."""
    if landing_page is None:
        return {
            "exists": False,
            "enabled": False,
            "released_version": None,
            "released_at": None,
        }

    return {
        "exists": True,
        "enabled": landing_page.enabled,
        "released_version": landing_page.released_version,
        "released_at": _iso(landing_page.released_at),
    }
