from datetime import datetime, timezone
from dateutil.parser import parse, ParserError
from werkzeug.http import parse_date
from clp.errors import InvalidConditionalHeader

# dateutil fills absent fields from its default; two distinct defaults
# expose a partial timestamp
_DEFAULTS = (
    datetime(2000, 1, 1, 0, 0, 0),
    datetime(2001, 2, 2, 1, 1, 1),
)


def normalize_ts(ts: datetime) -> datetime:
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def to_http_precision(ts: datetime) -> datetime:
    """HTTP dates carry whole seconds only."""
    return normalize_ts(ts).replace(microsecond=0)


def parse_header_date(value: str) -> datetime:
    """
    Parse an If-Modified-Since style header.

    RFC 7231 HTTP-dates are read by Werkzeug. Other formats are only
    accepted when they name a complete timestamp down to the second,
    e.g. "2026-10-19 10:00:00 +0000". Raises InvalidConditionalHeader
    otherwise.
    """
    http_date = parse_date(value)
    if http_date is not None:
        return normalize_ts(http_date)

    try:
        candidates = [parse(value, default=default) for default in _DEFAULTS]
    except (ParserError, ValueError, OverflowError) as exc:
        raise InvalidConditionalHeader(f"Unparseable date header: {value!r}") from exc

    first, second = candidates
    if first != second:
        raise InvalidConditionalHeader(f"Incomplete date header: {value!r}")
    return normalize_ts(first)
