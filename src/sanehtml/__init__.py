from .policy import DEFAULT_POLICY, DEFAULTS, DynamicAttributes, SanitizationPolicy, StaticAttributes
from .sanitize import sanitize_html
from .serialize import escape_html
from .tokens import ParseError
from .urls import is_naughty_href

__all__ = [
    "DEFAULTS",
    "DEFAULT_POLICY",
    "DynamicAttributes",
    "ParseError",
    "SanitizationPolicy",
    "StaticAttributes",
    "escape_html",
    "is_naughty_href",
    "sanitize_html",
]
