"""Element and policy constants.

Element sets are kept as lists to maintain a consistent iteration order while
still allowing membership tests; the policy defaults mirror the options a
caller starts from when no configuration is given.

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/syntax.html#optional-tags
"""

# HTML Element Sets
VOID_ELEMENTS = [
    "area",
    "base",
    "basefont",
    "bgsound",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
]

# Content is text up to the matching end tag; never tokenized as markup.
RAWTEXT_ELEMENTS = [
    "title",
    "textarea",
    "style",
    "script",
    "xmp",
    "iframe",
    "noembed",
    "noframes",
]

# Opening any of these closes an open <p>.
P_CLOSING_ELEMENTS = [
    "address",
    "article",
    "aside",
    "blockquote",
    "details",
    "dialog",
    "dir",
    "div",
    "dl",
    "fieldset",
    "figcaption",
    "figure",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hgroup",
    "hr",
    "main",
    "menu",
    "nav",
    "ol",
    "p",
    "pre",
    "section",
    "table",
    "ul",
]

_FORM_CONTROLS = {"input", "option", "optgroup", "select", "button", "datalist", "textarea"}

# Opening tag -> open tags it implicitly closes when they are the current node.
IMPLIED_CLOSES = {
    "tr": {"tr", "th", "td"},
    "th": {"th"},
    "td": {"thead", "th", "td"},
    "body": {"head", "link", "script"},
    "li": {"li"},
    "dt": {"dt", "dd"},
    "dd": {"dt", "dd"},
    "option": {"option"},
    "optgroup": {"optgroup", "option"},
    "rt": {"rt", "rp"},
    "rp": {"rt", "rp"},
    "tbody": {"thead", "tbody"},
    "tfoot": {"thead", "tbody"},
    "select": _FORM_CONTROLS,
    "input": _FORM_CONTROLS,
    "output": _FORM_CONTROLS,
    "button": _FORM_CONTROLS,
    "datalist": _FORM_CONTROLS,
    "textarea": _FORM_CONTROLS,
}
for _tag in P_CLOSING_ELEMENTS:
    IMPLIED_CLOSES[_tag] = IMPLIED_CLOSES.get(_tag, set()) | {"p"}
del _tag

# Implied closes do not reach past these (when they are in the output).
SCOPE_BOUNDARIES = {
    "applet",
    "button",
    "caption",
    "dl",
    "html",
    "marquee",
    "menu",
    "object",
    "ol",
    "select",
    "table",
    "tbody",
    "td",
    "template",
    "tfoot",
    "th",
    "thead",
    "tr",
    "ul",
}

# Policy defaults
DEFAULT_ALLOWED_TAGS = [
    "h3",
    "h4",
    "h5",
    "h6",
    "blockquote",
    "p",
    "a",
    "ul",
    "ol",
    "nl",
    "li",
    "b",
    "i",
    "strong",
    "em",
    "strike",
    "code",
    "hr",
    "br",
    "div",
    "table",
    "thead",
    "caption",
    "tbody",
    "tr",
    "th",
    "td",
    "pre",
]

DEFAULT_ALLOWED_ATTRIBUTES = {
    "a": ["href", "name", "target"],
    # img is not allowed by default, but this is the sensible rule if it is.
    "img": ["src"],
}

DEFAULT_SELF_CLOSING = ["img", "br", "hr", "area", "base", "basefont", "input", "link", "meta"]

# Tags holding something other than HTML: when disallowed, their content goes too.
NON_TEXT_ELEMENTS = ["script", "style"]

SAFE_URL_SCHEMES = ["http", "https", "ftp", "mailto"]

# Attributes whose values are checked for a naughty URL scheme.
URL_ATTRIBUTES = {"href", "src"}
