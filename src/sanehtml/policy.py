"""Sanitization policy.

A `SanitizationPolicy` is built once per sanitize call from caller options
and only read afterwards. `DEFAULTS` holds the options used when a caller
gives none; it is exposed so callers can start from it::

    options = {"allowed_tags": [*DEFAULTS["allowed_tags"], "img"]}
    sanitize_html(html, options)

Attribute rules come in two flavours. A collection of names is a
`StaticAttributes` rule: only those attributes survive. A callable is a
`DynamicAttributes` rule: it receives every attribute of the tag and its
return value is trusted as-is. Either way, ``href`` and ``src`` values are
still checked for a naughty URL scheme afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from .constants import (
    DEFAULT_ALLOWED_ATTRIBUTES,
    DEFAULT_ALLOWED_TAGS,
    DEFAULT_SELF_CLOSING,
    NON_TEXT_ELEMENTS,
    SAFE_URL_SCHEMES,
)

AttributeFilter = Callable[[dict[str, str]], Mapping[str, str]]
ContentFunction = Callable[[str, Mapping[str, str]], str]


def _name_set(names: Any) -> frozenset[str]:
    if not names:
        return frozenset()
    if isinstance(names, str):
        names = [names]
    return frozenset(str(name).lower() for name in names)


@dataclass(frozen=True, slots=True)
class StaticAttributes:
    names: frozenset[str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", _name_set(self.names))

    def __contains__(self, name: object) -> bool:
        return name in self.names


@dataclass(frozen=True, slots=True)
class DynamicAttributes:
    filter: AttributeFilter

    def __call__(self, attrs: Mapping[str, str]) -> dict[str, str]:
        # The filter gets its own copy; whatever it returns is kept verbatim.
        return dict(self.filter(dict(attrs)) or {})


AttributePolicy = Union[StaticAttributes, DynamicAttributes]


def _attribute_policy(rule: Any) -> AttributePolicy:
    if isinstance(rule, (StaticAttributes, DynamicAttributes)):
        return rule
    if callable(rule):
        return DynamicAttributes(rule)
    return StaticAttributes(rule)


@dataclass(frozen=True, slots=True)
class SanitizationPolicy:
    """An allow-list driven policy for the filtering engine.

    - Tags not in `allowed_tags` are dropped; their children are kept unless
      the tag is also one of `non_text_tags`, in which case its whole content
      goes too.
    - Attributes are filtered per tag by `allowed_attributes`; a tag without
      an entry keeps no attributes.
    - Tags in `self_closing` are written as ``<tag />`` and take no children.
    - Tags in `content_functions` have their sanitized inner markup passed
      through the function when they close.
    - Tags in `dont_parse` have their inner source escaped verbatim instead
      of being parsed.

    All names are normalized to ASCII-lowercase.
    """

    allowed_tags: Collection[str]
    allowed_attributes: Mapping[str, Any] = field(default_factory=dict)
    self_closing: Collection[str] = field(default_factory=frozenset)
    content_functions: Mapping[str, ContentFunction] = field(default_factory=dict)
    dont_parse: Collection[str] = field(default_factory=frozenset)
    non_text_tags: Collection[str] = field(default_factory=lambda: frozenset(NON_TEXT_ELEMENTS))
    allowed_schemes: Collection[str] = field(default_factory=lambda: frozenset(SAFE_URL_SCHEMES))

    def __post_init__(self) -> None:
        # Normalize to frozensets and read-only mappings so the engine can do
        # fast membership checks and nothing can change mid-call.
        for name in ("allowed_tags", "self_closing", "dont_parse", "non_text_tags", "allowed_schemes"):
            object.__setattr__(self, name, _name_set(getattr(self, name)))

        attributes = {
            str(tag).lower(): _attribute_policy(rule) for tag, rule in (self.allowed_attributes or {}).items()
        }
        object.__setattr__(self, "allowed_attributes", MappingProxyType(attributes))

        # Non-callables are ignored rather than reported.
        functions = {str(tag).lower(): func for tag, func in (self.content_functions or {}).items() if callable(func)}
        object.__setattr__(self, "content_functions", MappingProxyType(functions))

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None, **overrides: Any) -> SanitizationPolicy:
        """Build a policy from caller options.

        Each missing option falls back to `DEFAULTS` on its own, so passing
        only ``allowed_tags`` keeps the default attribute rules. Unknown
        option names are ignored.
        """
        merged = dict(DEFAULTS)
        for source in (options or {}, overrides):
            for key, value in source.items():
                key = _OPTION_ALIASES.get(key, key)
                if key in merged:
                    merged[key] = value
        return cls(**merged)


DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "allowed_tags": tuple(DEFAULT_ALLOWED_TAGS),
        "allowed_attributes": MappingProxyType(
            {tag: tuple(names) for tag, names in DEFAULT_ALLOWED_ATTRIBUTES.items()}
        ),
        "self_closing": tuple(DEFAULT_SELF_CLOSING),
        "content_functions": MappingProxyType({}),
        "dont_parse": (),
        "non_text_tags": tuple(NON_TEXT_ELEMENTS),
        "allowed_schemes": tuple(SAFE_URL_SCHEMES),
    }
)

# camelCase option names are accepted as aliases.
_OPTION_ALIASES = {
    "allowedTags": "allowed_tags",
    "allowedAttributes": "allowed_attributes",
    "selfClosing": "self_closing",
    "contentFunctions": "content_functions",
    "dontParse": "dont_parse",
    "nonTextTags": "non_text_tags",
    "allowedSchemes": "allowed_schemes",
}

DEFAULT_POLICY: SanitizationPolicy = SanitizationPolicy.from_options()
