"""Entity and character reference decoding for text and attribute values.

Only the five predefined XML entities and numeric character references are
decoded. Anything else (including references to DTD-declared entities) is
left in place verbatim since DTD processing is not supported.
"""

import re

PREDEFINED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}

MAX_CODE_POINT = 0x10FFFF
_SURROGATE_RANGE = range(0xD800, 0xE000)

_REFERENCE_PATTERN = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z_][\w.\-]*);")


def _resolve(match: "re.Match[str]") -> str:
    reference = match.group(1)

    if reference[0] != "#":
        return PREDEFINED_ENTITIES.get(reference, match.group(0))

    if reference[1] in "xX":
        code_point = int(reference[2:], 16)
    else:
        code_point = int(reference[1:])

    if code_point == 0 or code_point > MAX_CODE_POINT or code_point in _SURROGATE_RANGE:
        return match.group(0)
    return chr(code_point)


def decode_entities(text: str) -> str:
    """Replace predefined entities and character references in ``text``.

    Args:
        text: Raw text or attribute value as it appears in the document

    Returns:
        Text with every resolvable reference replaced

    Examples:
        >>> decode_entities("a &lt; b &amp;&amp; c")
        'a < b && c'
        >>> decode_entities("&#65;&#x42;&unknown;")
        'AB&unknown;'
    """
    if "&" not in text:
        return text
    return _REFERENCE_PATTERN.sub(_resolve, text)
