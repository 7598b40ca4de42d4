from __future__ import annotations

import re
import string

__all__ = [
    "LEGACY_LOGIN_RE",
    "normalize_path",
    "sanitize_path_setting",
    "is_legacy_login",
]

# The well-known login endpoint, matched anywhere in the raw request path.
LEGACY_LOGIN_RE = re.compile(r"/wp-login\.php", re.IGNORECASE)

_TRIM_CHARS = string.whitespace + "/"

# RFC 3986 pchar set plus "/" (no "%": encoded octets are dropped on write).
_VALID_SETTING_RE = re.compile(r"^[A-Za-z0-9._~!$&'()*+,;=:@/-]+$")
_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[0-9a-fA-F]{2}")
_BREAKS_RE = re.compile(r"[\r\n\t\0]+")
_SPACES_RE = re.compile(r" {2,}")


def normalize_path(raw: str | None) -> str:
    """Reduce a request path or configured path to its comparison form.

    Rules:
    - Drop everything from the first "?" (query string).
    - Drop everything from the first "#" (fragment).
    - Trim leading/trailing "/" and whitespace, in any mix.

    Never raises: anything that is not a string normalizes to "".
    """
    if not isinstance(raw, str) or not raw:
        return ""

    p = raw.split("?", 1)[0]
    p = p.split("#", 1)[0]
    return p.strip(_TRIM_CHARS)


def sanitize_path_setting(value: str | None) -> str:
    """Clean an administrator-supplied path before it is stored.

    Applies `normalize_path`, then the text-field cleanup (tags, encoded
    octets, line breaks and repeated spaces removed).

    Raises:
        ValueError: if what remains contains characters that cannot appear
            in a path segment.
    """
    p = normalize_path(value)
    if not p:
        return ""

    p = _TAG_RE.sub("", p)
    p = _OCTET_RE.sub("", p)
    p = _BREAKS_RE.sub(" ", p)
    p = _SPACES_RE.sub(" ", p)
    p = normalize_path(p)
    if p and not _VALID_SETTING_RE.match(p):
        raise ValueError("path contains invalid characters")
    return p


def is_legacy_login(raw_path: str | None) -> bool:
    """Return True if the raw (un-normalized) path targets the legacy login endpoint."""
    if not isinstance(raw_path, str):
        return False
    return LEGACY_LOGIN_RE.search(raw_path) is not None
