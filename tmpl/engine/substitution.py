"""Variable substitution for template lines.

``$name`` expands to the stored value of ``name`` and ``$$name`` yields the
literal ``$name``. The line is scanned once from left to right and each
``$`` is matched against the longest stored key that follows it, so keys
that are prefixes of one another never interfere and substituted values
are never expanded a second time. Unknown names are left as written.
"""
from typing import Mapping, Optional

ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def _longest_key(text: str, pos: int, keys) -> Optional[str]:
    best = None
    for key in keys:
        if key and text.startswith(key, pos) and (best is None or len(key) > len(best)):
            best = key
    return best


def substitute(text: str, variables: Mapping[str, str]) -> str:
    """Return ``text`` with every known ``$name`` replaced by its value."""
    if "$" not in text or not variables:
        return text

    keys = sorted(variables)
    out = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char != "$":
            out.append(char)
            i += 1
            continue

        if text.startswith("$", i + 1):
            key = _longest_key(text, i + 2, keys)
            if key is not None:
                out.append("$" + key)
                i += 2 + len(key)
                continue

        key = _longest_key(text, i + 1, keys)
        if key is not None:
            out.append(variables[key])
            i += 1 + len(key)
        else:
            out.append("$")
            i += 1

    return "".join(out)


def unescape(text: str) -> str:
    """Turn literal ``\\n``, ``\\t`` and ``\\r`` sequences into control characters.

    Any other backslash is kept as is.
    """
    if "\\" not in text:
        return text

    out = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text) and text[i + 1] in ESCAPES:
            out.append(ESCAPES[text[i + 1]])
            i += 2
        else:
            out.append(char)
            i += 1
    return "".join(out)
