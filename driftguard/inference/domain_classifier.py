"""
Domain Classifier: maps a page URL to PRODUCTIVE / DISTRACTION / UNKNOWN.

Lookup order on the extracted hostname (first match wins):
  1. custom distraction   (exact)
  2. custom productive    (exact)
  3. built-in distraction (exact)
  4. built-in productive  (exact or subdomain)
  5. academic / government suffix
  6. UNKNOWN
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Set
from urllib.parse import urlsplit


class DomainCategory(str, Enum):
    PRODUCTIVE = "productive"
    DISTRACTION = "distraction"
    UNKNOWN = "unknown"


BUILTIN_PRODUCTIVE: FrozenSet[str] = frozenset({
    "github.com",
    "gitlab.com",
    "stackoverflow.com",
    "stackexchange.com",
    "docs.python.org",
    "developer.mozilla.org",
    "coursera.org",
    "edx.org",
    "khanacademy.org",
    "udemy.com",
    "arxiv.org",
    "scholar.google.com",
    "semanticscholar.org",
    "jstor.org",
    "pubmed.ncbi.nlm.nih.gov",
    "wikipedia.org",
    "notion.so",
    "docs.google.com",
    "overleaf.com",
    "leetcode.com",
    "kaggle.com",
})

BUILTIN_DISTRACTION: FrozenSet[str] = frozenset({
    "youtube.com",
    "m.youtube.com",
    "reddit.com",
    "old.reddit.com",
    "facebook.com",
    "instagram.com",
    "twitter.com",
    "x.com",
    "tiktok.com",
    "netflix.com",
    "twitch.tv",
    "9gag.com",
    "pinterest.com",
    "tumblr.com",
    "primevideo.com",
    "hulu.com",
})

# Suffixes that mark academic and government hosts
_ACADEMIC_SUFFIXES = (".edu", ".gov")
# Second-level labels used under country-code TLDs (ox.ac.uk, tsinghua.edu.cn, india.gov.in)
_ACADEMIC_SECOND_LEVEL = ("edu", "gov", "ac")

_WEB_SCHEMES = ("http", "https")


@dataclass
class DomainLists:
    """Built-in lists are fixed; custom lists are user-managed and persisted."""
    custom_productive: Set[str] = field(default_factory=set)
    custom_distraction: Set[str] = field(default_factory=set)
    builtin_productive: FrozenSet[str] = BUILTIN_PRODUCTIVE
    builtin_distraction: FrozenSet[str] = BUILTIN_DISTRACTION

    def set_custom(
        self,
        productive: Optional[Iterable[str]] = None,
        distraction: Optional[Iterable[str]] = None,
    ) -> None:
        if productive is not None:
            self.custom_productive = normalize_hosts(productive)
        if distraction is not None:
            self.custom_distraction = normalize_hosts(distraction)


def extract_hostname(url: str) -> str:
    """
    Return the bare hostname of *url* ("" when there is none).
    Scheme-less input ("coursera.org/learn") is treated as http.
    """
    if not url or not isinstance(url, str):
        return ""
    raw = url.strip().lower()
    if not raw:
        return ""
    if "://" not in raw:
        if ":" in raw.split("/", 1)[0] and not raw.split(":", 1)[1][:1].isdigit():
            return ""  # about:blank, mailto:x, javascript:...
        raw = "http://" + raw
    try:
        parts = urlsplit(raw)
        if parts.scheme not in _WEB_SCHEMES:
            return ""
        host = parts.hostname or ""
    except ValueError:
        return ""
    host = host.strip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


def is_academic_host(host: str) -> bool:
    """True for .edu / .gov hosts and their country forms (.ac.uk, .edu.cn, .gov.in, ...)."""
    if host.endswith(_ACADEMIC_SUFFIXES):
        return True
    parts = host.split(".")
    return len(parts) >= 3 and parts[-2] in _ACADEMIC_SECOND_LEVEL and len(parts[-1]) == 2


def normalize_hosts(entries: Iterable[str]) -> Set[str]:
    """Normalise user-entered domains; entries without a hostname are dropped."""
    hosts = set()
    for entry in entries:
        host = extract_hostname(entry)
        if host:
            hosts.add(host)
    return hosts


def classify_domain(url: str, lists: Optional[DomainLists] = None) -> DomainCategory:
    """Classify *url*. Never raises: malformed input is UNKNOWN."""
    lists = lists if lists is not None else DomainLists()
    host = extract_hostname(url)
    if not host:
        return DomainCategory.UNKNOWN

    if host in lists.custom_distraction:
        return DomainCategory.DISTRACTION
    if host in lists.custom_productive:
        return DomainCategory.PRODUCTIVE
    if host in lists.builtin_distraction:
        return DomainCategory.DISTRACTION
    if any(host == d or host.endswith("." + d) for d in lists.builtin_productive):
        return DomainCategory.PRODUCTIVE
    if is_academic_host(host):
        return DomainCategory.PRODUCTIVE
    return DomainCategory.UNKNOWN
