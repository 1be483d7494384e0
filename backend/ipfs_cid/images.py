# ipfs_cid/images.py
"""
Remote image allow-list for the web front end's image optimizer.

Only these origins may be proxied and resized: uploaded CIDs served from the
w3s.link subdomain gateway, and the seeded placeholder images. The upload
pipeline itself never consults this list.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlsplit

REMOTE_PATTERN_URLS = (
    "https://*.ipfs.w3s.link/*",
    "https://picsum.photos/seed/**",
)


def _glob_to_regex(pattern: str, separator: str) -> re.Pattern:
    # "**" spans separators, "*" stays within one label/segment
    parts = []
    for token in re.split(r"(\*\*|\*)", pattern):
        if token == "**":
            parts.append(".*")
        elif token == "*":
            parts.append(f"[^{re.escape(separator)}]+")
        else:
            parts.append(re.escape(token))
    return re.compile("".join(parts))


@dataclass(frozen=True)
class RemotePattern:
    protocol: str
    hostname: str
    pathname: str
    port: str = ""
    search: str = ""

    @classmethod
    def from_url(cls, url: str) -> "RemotePattern":
        parts = urlsplit(url)
        return cls(
            protocol=parts.scheme,
            hostname=parts.hostname or "",
            pathname=parts.path or "/",
            port=str(parts.port) if parts.port else "",
            search=f"?{parts.query}" if parts.query else "",
        )

    @lru_cache(maxsize=None)
    def _regexes(self) -> tuple[re.Pattern, re.Pattern]:
        return (
            _glob_to_regex(self.hostname, "."),
            _glob_to_regex(self.pathname, "/"),
        )

    def matches(self, url: str) -> bool:
        parts = urlsplit(url)
        if parts.scheme != self.protocol:
            return False
        if (str(parts.port) if parts.port else "") != self.port:
            return False
        if (f"?{parts.query}" if parts.query else "") != self.search:
            return False

        hostname_re, pathname_re = self._regexes()
        return bool(
            hostname_re.fullmatch(parts.hostname or "")
            and pathname_re.fullmatch(parts.path or "/")
        )


REMOTE_PATTERNS = tuple(RemotePattern.from_url(url) for url in REMOTE_PATTERN_URLS)


def is_allowed_image_url(url: str, patterns=REMOTE_PATTERNS) -> bool:
    """True if ``url`` may be served through the image optimizer."""
    if not url:
        return False
    try:
        return any(pattern.matches(url) for pattern in patterns)
    except ValueError:
        # urlsplit rejects malformed ports and IPv6 literals
        return False
