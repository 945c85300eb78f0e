"""Per-tag attribute filtering."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from .constants import URL_ATTRIBUTES
from .policy import DynamicAttributes, SanitizationPolicy
from .urls import is_naughty_href

Report = Callable[[str, str], None]


def sanitize_attributes(
    tag: str,
    attrs: Mapping[str, str],
    policy: SanitizationPolicy,
    report: Report | None = None,
) -> dict[str, str]:
    """Return the attributes of ``tag`` that may be written out.

    Values are expected to be escaped already and are not touched. An
    ``href`` or ``src`` with a naughty scheme is removed entirely, name and
    value, rather than left behind as a bare attribute.
    """
    rule = policy.allowed_attributes.get(tag)
    if isinstance(rule, DynamicAttributes):
        kept = rule(attrs)
    else:
        kept = {}
        for name, value in attrs.items():
            if rule is not None and name in rule:
                kept[name] = value
            elif report is not None:
                report("disallowed-attribute", f"Unsafe attribute '{name}' on <{tag}>")

    result: dict[str, str] = {}
    for name, value in kept.items():
        value = "" if value is None else str(value)
        if name.lower() in URL_ATTRIBUTES and is_naughty_href(value, policy.allowed_schemes):
            if report is not None:
                report("unsafe-url", f"Unsafe URL in attribute '{name}' on <{tag}>")
            continue
        result[name] = value
    return result
