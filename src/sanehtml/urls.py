"""URL scheme checks for link-bearing attributes."""

from __future__ import annotations

import re
from collections.abc import Collection

from .constants import SAFE_URL_SCHEMES
from .entities import decode_entities_in_text

# Browsers ignore control characters and spaces almost anywhere in a scheme
# prefix ("java\tscript:"), so every one of them goes, not just a leading run.
# https://owasp.org/www-community/xss-filter-evasion-cheatsheet#embedded-tab
_CONTROL_CHARACTERS = re.compile(r"[\x00-\x20]+")
_SCHEME = re.compile(r"^([a-zA-Z]+):")


def is_naughty_href(href: str, allowed_schemes: Collection[str] = SAFE_URL_SCHEMES) -> bool:
    """Return True if ``href`` uses a scheme outside ``allowed_schemes``.

    A value without a scheme is a relative reference and is never naughty.
    """
    # Decoded first so "j&#97;vascript:" and "&#x6A;avascript:" are caught.
    href = decode_entities_in_text(href)
    href = _CONTROL_CHARACTERS.sub("", href)
    match = _SCHEME.match(href)
    if match is None:
        return False
    return match.group(1).lower() not in allowed_schemes
