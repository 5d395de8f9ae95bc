"""
String helpers: URL query escaping, code-point substrings, regex replacement
with `$1`-style templates, and first-letter capitalisation.
"""

import re
from urllib.parse import quote_plus, unquote_plus

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# $$, ${name}, $name (name = letters, digits, underscores)
_TEMPLATE_VAR_RE = re.compile(r"\$(?:(\$)|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")
_GROUP_NUMBER_RE = re.compile(r"[0-9]+")


def url_encode(s: str) -> str:
    """
    Escape s for use in a URL query.

    Space becomes "+"; everything except ASCII letters, digits and "-_.~" is
    percent-encoded from its UTF-8 bytes.

    Example:
        >>> url_encode("a b&c")
        'a+b%26c'
    """
    return quote_plus(s, safe="")


def url_decode(s: str) -> str:
    """
    Inverse of url_encode.

    Raises:
        ValueError: If s contains a "%" not followed by two hex digits.
    """
    bad = _BAD_ESCAPE_RE.search(s)
    if bad is not None:
        raise ValueError(f"invalid URL escape {s[bad.start():bad.start() + 3]!r}")
    return unquote_plus(s)


def substring(s: str, start: int, length: int) -> str:
    """
    Take `length` code points of s starting at code point `start`.

    **Functionally**:
      - The end index is start + length, computed before any clamping.
      - A negative start is clamped to 0; an end past the string is clamped
        to its length.
      - An empty or inverted range yields "".

    Examples:
        >>> substring("héllo", 1, 3)
        'éll'
        >>> substring("hello", -2, 4)
        'he'
    """
    end = start + length
    if start < 0:
        start = 0
    if end > len(s):
        end = len(s)
    if start >= end:
        return ""
    return s[start:end]


def _expand_template(match: re.Match, template: str) -> str:
    def variable(var: re.Match) -> str:
        if var.group(1):
            return "$"
        name = var.group(2) or var.group(3)
        if _GROUP_NUMBER_RE.fullmatch(name):
            index = int(name)
            if index > match.re.groups:
                return ""
            return match.group(index) or ""
        if name in match.re.groupindex:
            return match.group(name) or ""
        return ""

    return _TEMPLATE_VAR_RE.sub(variable, template)


def regex_replace(src: str, replace: str, pattern: str) -> str:
    """
    Replace every match of pattern in src.

    The replacement is a template: `$0`/`$1`/`${1}` insert numbered groups,
    `$name`/`${name}` insert named groups, `$$` inserts a literal "$". A
    reference to a missing or unmatched group inserts nothing. `$name` takes
    the longest run of letters, digits and underscores, so use `${1}x` rather
    than `$1x` to follow a group with text.

    Raises:
        re.error: If pattern is not a valid regular expression.

    Example:
        >>> regex_replace("a1b2", "<$0>", r"\\d")
        'a<1>b<2>'
    """
    compiled = re.compile(pattern)
    return compiled.sub(lambda m: _expand_template(m, replace), src)


def upper_first(s: str) -> str:
    """Upper-case the first character if it is an ASCII lowercase letter."""
    if s and "a" <= s[0] <= "z":
        return s[0].upper() + s[1:]
    return s
