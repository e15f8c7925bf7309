"""Hyperlink targets for contact and project fields.

Records store links the way users type them: full URLs, bare domains or
handles. Targets are derived here at render time; the record is never
rewritten.
"""

import re

GITHUB_BASE = "https://github.com/"
LINKEDIN_BASE = "https://linkedin.com/in/"

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def has_scheme(value: str) -> bool:
    """Check whether ``value`` already names a scheme (``https:``, ``mailto:``...).

    Examples:
        >>> has_scheme("https://github.com/octocat")
        True
        >>> has_scheme("octocat")
        False
    """
    return bool(_SCHEME.match(value)) and not value.split(":", 1)[1][:1].isdigit()


def normalize_url(value: str, base: str | None = None) -> str:
    """Turn a user-entered link into an absolute URL.

    A value with a scheme is returned unchanged. A value starting with a
    domain (``github.com/octocat``) gets an ``https://`` prefix. A bare
    handle or path is appended to ``base``.
    """
    value = value.strip()
    if has_scheme(value):
        return value
    if base is None or "." in value.split("/", 1)[0]:
        return f"https://{value}"
    return base + value.strip("@/")


def github_url(value: str) -> str:
    """Link target for a GitHub handle, ``user/repo`` path or URL."""
    return normalize_url(value, GITHUB_BASE)


def linkedin_url(value: str) -> str:
    """Link target for a LinkedIn handle or profile URL."""
    return normalize_url(value, LINKEDIN_BASE)


def mailto_url(email: str) -> str:
    return f"mailto:{email.strip()}"


def tel_url(phone: str) -> str:
    """``tel:`` target with spaces and separators removed."""
    digits = re.sub(r"[^\d+]", "", phone)
    return f"tel:{digits}"
