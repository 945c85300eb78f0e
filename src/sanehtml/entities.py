"""HTML5 character reference decoding.

Used in two places: the tokenizer decodes references in text and attribute
values, and the URL validator decodes them again so an encoded scheme such as
``j&#97;vascript:`` cannot slip past the scheme check.
"""

import html.entities

# Python ships the complete HTML5 list; keys carry the trailing semicolon
# ("amp;") for most names and not for the legacy ones ("amp").
NAMED_ENTITIES = {}
for _key, _value in html.entities.html5.items():
    NAMED_ENTITIES[_key[:-1] if _key.endswith(";") else _key] = _value
del _key, _value

# Legacy references that are recognised without a terminating semicolon
# (WHATWG §13.5); everything else needs the semicolon.
LEGACY_ENTITIES = {name for name in html.entities.html5 if not name.endswith(";")}

# Numeric references in the C1 range map to Windows-1252 (§13.2.5.80).
NUMERIC_REPLACEMENTS = {
    0x00: "\ufffd",  # NULL
    0x80: "\u20ac",  # EURO SIGN
    0x82: "\u201a",  # SINGLE LOW-9 QUOTATION MARK
    0x83: "\u0192",  # LATIN SMALL LETTER F WITH HOOK
    0x84: "\u201e",  # DOUBLE LOW-9 QUOTATION MARK
    0x85: "\u2026",  # HORIZONTAL ELLIPSIS
    0x86: "\u2020",  # DAGGER
    0x87: "\u2021",  # DOUBLE DAGGER
    0x88: "\u02c6",  # MODIFIER LETTER CIRCUMFLEX ACCENT
    0x89: "\u2030",  # PER MILLE SIGN
    0x8a: "\u0160",  # LATIN CAPITAL LETTER S WITH CARON
    0x8b: "\u2039",  # SINGLE LEFT-POINTING ANGLE QUOTATION MARK
    0x8c: "\u0152",  # LATIN CAPITAL LIGATURE OE
    0x8e: "\u017d",  # LATIN CAPITAL LETTER Z WITH CARON
    0x91: "\u2018",  # LEFT SINGLE QUOTATION MARK
    0x92: "\u2019",  # RIGHT SINGLE QUOTATION MARK
    0x93: "\u201c",  # LEFT DOUBLE QUOTATION MARK
    0x94: "\u201d",  # RIGHT DOUBLE QUOTATION MARK
    0x95: "\u2022",  # BULLET
    0x96: "\u2013",  # EN DASH
    0x97: "\u2014",  # EM DASH
    0x98: "\u02dc",  # SMALL TILDE
    0x99: "\u2122",  # TRADE MARK SIGN
    0x9a: "\u0161",  # LATIN SMALL LETTER S WITH CARON
    0x9b: "\u203a",  # SINGLE RIGHT-POINTING ANGLE QUOTATION MARK
    0x9c: "\u0153",  # LATIN SMALL LIGATURE OE
    0x9e: "\u017e",  # LATIN SMALL LETTER Z WITH CARON
    0x9f: "\u0178",  # LATIN CAPITAL LETTER Y WITH DIAERESIS
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")


def decode_numeric_entity(text, is_hex=False):
    """Decode the digits of a numeric reference (``60`` or ``3C``).

    Returns the decoded character, or None when ``text`` is not a number.
    """
    try:
        codepoint = int(text, 16 if is_hex else 10)
    except ValueError:
        return None
    if codepoint in NUMERIC_REPLACEMENTS:
        return NUMERIC_REPLACEMENTS[codepoint]
    if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return "\ufffd"
    return chr(codepoint)


def _legacy_blocked(next_char, in_attribute):
    # §13.2.5.73: inside an attribute, "&amp=" or "&ampx" stays literal.
    if not in_attribute or not next_char:
        return False
    return next_char.isalnum() or next_char == "="


def decode_entities_in_text(text, in_attribute=False):
    """Decode every character reference in ``text``.

    Handles named references (``&amp;``, ``&nbsp``), decimal (``&#60;``) and
    hexadecimal (``&#x3C;``) forms. Unknown references are left verbatim.
    """
    if "&" not in text:
        return text

    result = []
    i = 0
    length = len(text)
    while i < length:
        amp = text.find("&", i)
        if amp == -1:
            result.append(text[i:])
            break
        if amp > i:
            result.append(text[i:amp])
        i = amp
        j = i + 1

        if j < length and text[j] == "#":
            j += 1
            is_hex = j < length and text[j] in "xX"
            if is_hex:
                j += 1
            digits = _HEX_DIGITS if is_hex else _DEC_DIGITS
            digit_start = j
            while j < length and text[j] in digits:
                j += 1
            has_semicolon = j < length and text[j] == ";"
            end = j + 1 if has_semicolon else j
            decoded = decode_numeric_entity(text[digit_start:j], is_hex=is_hex) if j > digit_start else None
            result.append(decoded if decoded else text[i:end])
            i = end
            continue

        while j < length and text[j].isalnum():
            j += 1
        name = text[i + 1 : j]
        if not name:
            result.append("&")
            i += 1
            continue
        has_semicolon = j < length and text[j] == ";"

        if has_semicolon and name in NAMED_ENTITIES:
            result.append(NAMED_ENTITIES[name])
            i = j + 1
            continue

        # Longest legacy prefix: "&notit;" decodes "&not" and keeps "it;".
        match_len = 0
        for k in range(len(name), 0, -1):
            if name[:k] in LEGACY_ENTITIES:
                match_len = k
                break
        if match_len:
            end = i + 1 + match_len
            next_char = text[end] if end < length else None
            if not _legacy_blocked(next_char, in_attribute):
                result.append(NAMED_ENTITIES[name[:match_len]])
                i = end
                continue

        result.append("&")
        i += 1

    return "".join(result)
