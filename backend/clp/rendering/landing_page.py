# clp/rendering/landing_page.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from flask import render_template
from jinja2 import TemplateError
from clp.errors import RenderError
from clp.models.landing_page import LandingPage
from clp.application.landing_pages.store import get_version
from clp.domain.invariants.document import parse_document
from clp.domain.invariants.exceptions import InvariantViolation
from clp.utils.http_dates import normalize_ts

# Section kinds whose children reference external records by id
LINKED_SECTION_KINDS = {
    "categories": "category",
    "listings": "listing",
}


@dataclass(frozen=True)
class RenderedPage:
    body: bytes
    last_modified: datetime


def _page_title(document: Dict[str, Any]) -> str:
    title = document["page"].get("title")
    if not isinstance(title, dict) or not isinstance(title.get("value"), str):
        raise RenderError("Page title is missing or has no string 'value'")
    return title["value"]


def _section_view(index: int, section: Dict[str, Any]) -> Dict[str, Any]:
    kind = section["kind"]
    child_key = LINKED_SECTION_KINDS.get(kind)
    if child_key is None:
        return {"kind": kind, "ids": [], "data": section}

    # "categories" -> [{"category": {"id": ...}}, ...]
    entries = section.get(kind)
    if not isinstance(entries, list):
        raise RenderError(f"Section {index} ({kind}) has no '{kind}' list")

    ids: List[Any] = []
    for entry in entries:
        ref = entry.get(child_key) if isinstance(entry, dict) else None
        if not isinstance(ref, dict) or ref.get("id") is None:
            raise RenderError(
                f"Section {index} ({kind}) has an entry without a {child_key} id"
            )
        ids.append(ref["id"])

    return {"kind": kind, "ids": ids, "data": section}


def render_document(document: Dict[str, Any], *, locale: Optional[str] = None) -> bytes:
    """Turn a decoded document into the landing page HTML."""
    title = _page_title(document)
    sections = [
        _section_view(index, section)
        for index, section in enumerate(document["sections"])
    ]

    try:
        html = render_template(
            "landing_page.html",
            title=title,
            page=document["page"],
            sections=sections,
            locale=locale,
        )
    except TemplateError as exc:
        raise RenderError(f"Template failed: {exc}") from exc

    return html.encode("utf-8")


def render_landing_page(
    *,
    tenant_id: str,
    version: int,
    locale: Optional[str] = None,
    released: bool = False,
) -> RenderedPage:
    """
    Render one stored version.

    Last-Modified is the version's creation time, or its release time
    when rendering the currently released version.
    """
    lpv = get_version(tenant_id=tenant_id, version=version)
    try:
        document = parse_document(lpv.content)
    except InvariantViolation as exc:
        raise RenderError(str(exc)) from exc

    body = render_document(document, locale=locale)

    last_modified = normalize_ts(lpv.created_at)
    if released:
        landing_page = LandingPage.query.filter_by(tenant_id=tenant_id).first()
        if (
            landing_page is not None
            and landing_page.released_version == version
            and landing_page.released_at is not None
        ):
            last_modified = max(last_modified, normalize_ts(landing_page.released_at))

    return RenderedPage(body=body, last_modified=last_modified)
