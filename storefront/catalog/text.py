"""Text helpers for catalog values.

Category keys, URL slugs and image reference resolution. All helpers
accept arbitrary input and coerce it to a string first.
"""

import re
from typing import Any

PLACEHOLDER_IMAGE = "/placeholder.svg"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_LOCAL_HOSTS = ("localhost", "127.0.0.1")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def normalize_category_key(label: Any) -> str:
    """Collapse a category label into a comparison key.

    Lower-cases, drops every non-alphanumeric character and strips a
    single trailing "s" so plural and singular labels compare equal
    ("T-Shirts" and "Tshirt" both become "tshirt").

    Labels that end in "s" without being plurals lose it as well
    ("Glass" becomes "glas"). Existing category data relies on this.

    Args:
        label: Category label.

    Returns:
        Normalized key.
    """
    key = _NON_ALNUM.sub("", _as_text(label).strip().lower())
    if key.endswith("s"):
        key = key[:-1]
    return key


def slugify(text: Any) -> str:
    """Build a URL slug.

    Args:
        text: Source text (region name, product title).

    Returns:
        Lower-case slug with runs of other characters replaced by "-".
    """
    return _NON_ALNUM.sub("-", _as_text(text).lower()).strip("-")


def resolve_image(
    src: Any,
    api_base: str = "",
    https_page: bool = False,
) -> str:
    """Resolve an image reference into a displayable URL.

    Absolute URLs pass through. Upload paths are served by the backend
    and get the API base prepended, unless the base is a local address
    while the page is served over HTTPS (mixed content).

    Args:
        src: Raw image reference.
        api_base: Public backend base URL.
        https_page: Whether the consuming page is served over HTTPS.

    Returns:
        Resolved image URL or the placeholder image.
    """
    s = _as_text(src)
    if not s:
        return PLACEHOLDER_IMAGE
    if s.startswith("http"):
        return s

    if s.startswith("/uploads") or s.startswith("uploads"):
        is_local_base = any(host in api_base for host in _LOCAL_HOSTS)
        if api_base and not (is_local_base and https_page):
            base = api_base[:-1] if api_base.endswith("/") else api_base
            return f"{base}{s}" if s.startswith("/") else f"{base}/{s}"

    return s
