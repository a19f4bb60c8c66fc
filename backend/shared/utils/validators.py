"""
Shared validators for input sanitization.
"""

from typing import Optional
from urllib.parse import urlparse

from shared.config.constants import Limits

# Hosts that must never appear in user-supplied image URLs (SSRF prevention)
BLOCKED_HOSTS = (
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "10.",
    "192.168.",
    "169.254.",
    "[::1]",
    "metadata.google",
)

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp", "mailto", "tel"}

MAX_URL_LENGTH = 2048


def validate_image_url(url: Optional[str]) -> Optional[str]:
    """
    Validate an image URL supplied for a shop or menu item.

    Returns the stripped URL, or None for empty input.

    Raises:
        ValueError: If the URL is malformed, uses a forbidden scheme or
            points at an internal host.
    """
    if url is None:
        return None

    url = url.strip()
    if not url:
        return None

    if len(url) > MAX_URL_LENGTH:
        raise ValueError(f"URL too long (max {MAX_URL_LENGTH} characters)")

    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_SCHEMES or scheme not in ("http", "https"):
        raise ValueError("Only HTTP/HTTPS image URLs are allowed")

    host = parsed.netloc.lower()
    if not host:
        raise ValueError("Image URL has no host")

    if any(blocked in host for blocked in BLOCKED_HOSTS):
        raise ValueError("Internal image URLs are not allowed")

    # 172.16.0.0/12
    if host.startswith("172."):
        parts = host.split(".")
        if len(parts) > 1 and parts[1].isdigit() and 16 <= int(parts[1]) <= 31:
            raise ValueError("Internal image URLs are not allowed")

    return url


def escape_like_pattern(value: str) -> str:
    """
    Escape LIKE wildcards so a search term matches literally.

    Use together with `.ilike(pattern, escape="\\\\")`.
    """
    if not value:
        return value

    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: Optional[str], max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> Optional[str]:
    """Trim, cap length and escape a free-text search term. Empty input yields None."""
    if term is None:
        return None
    term = term.strip()[:max_length]
    if not term:
        return None
    return escape_like_pattern(term)
