# app/pagination.py
import math
from typing import Any, Optional, Sequence, Tuple

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
# keeps page * per_page inside a signed 64-bit OFFSET
MAX_PAGE = 1_000_000_000
MAX_PER_PAGE = 1_000_000_000


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if math.isfinite(number) else None


def page_params(page: Any = None, per_page: Any = None) -> Tuple[int, int]:
    """Coerce raw `page` / `per_page` query values.

    Absent, non-numeric or non-positive values fall back to page 1 and 10 per page.
    Fractions are truncated and oversized values are capped.
    """
    p = _to_int(page)
    pp = _to_int(per_page)
    if p is None or p < 1:
        p = DEFAULT_PAGE
    if pp is None or pp < 1:
        pp = DEFAULT_PER_PAGE
    return min(p, MAX_PAGE), min(pp, MAX_PER_PAGE)


def offset_for(page: int, per_page: int) -> int:
    return (max(page, 1) - 1) * per_page


def paginate(items: Sequence[Any], page: int, per_page: int) -> list:
    """Return the 1-based `page` of `items`; an offset past the end gives []."""
    start = offset_for(page, per_page)
    return list(items[start:start + per_page])
