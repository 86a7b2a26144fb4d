import datetime as dt
import html
import logging
import re
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

import requests

from ..snapshots import ChannelSeed, EmailCandidate, EmailLookup
from ..youtube import RATE_LIMITER, SESSION, about_page_url

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}", re.IGNORECASE)
EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REJECTED_FRAGMENTS = (
    "noreply",
    "no-reply",
    "donotreply",
    "example.com",
    "test.com",
    "localhost",
)
BUSINESS_KEYWORDS = (
    "business",
    "contact",
    "info",
    "hello",
    "support",
    "inquiry",
    "inquiries",
    "partnership",
    "partnerships",
    "collaboration",
    "collab",
    "media",
    "press",
)
MAX_EMAIL_LENGTH = 100
BIO_CONFIDENCE = 0.9
MAX_ALTERNATIVES = 3

SOURCE_BIO = "youtube_bio"
SOURCE_FALLBACK = "fallback"
SOURCE_NONE = "none"


def is_valid_email(address: str) -> bool:
    lowered = address.lower()
    if any(fragment in lowered for fragment in REJECTED_FRAGMENTS):
        return False
    if len(address) > MAX_EMAIL_LENGTH:
        return False
    return bool(EMAIL_SHAPE.match(address))


def is_business_email(address: str) -> bool:
    lowered = address.lower()
    return any(keyword in lowered for keyword in BUSINESS_KEYWORDS)


def extract_emails(text: Optional[str]) -> List[EmailCandidate]:
    """Return valid email candidates in the order they appear in ``text``."""
    if not text:
        return []
    candidates: List[EmailCandidate] = []
    seen = set()
    for match in EMAIL_REGEX.finditer(text):
        address = match.group(0)
        lowered = address.lower()
        if lowered in seen:
            continue
        seen.add(lowered)
        if not is_valid_email(address):
            continue
        candidates.append(EmailCandidate(address=address, is_business_like=is_business_email(address)))
    return candidates


def select_best(candidates: Iterable[EmailCandidate]) -> Optional[EmailCandidate]:
    """Prefer the first business-like address, else the first one at all."""
    candidates = list(candidates)
    if not candidates:
        return None
    chosen = next((candidate for candidate in candidates if candidate.is_business_like), candidates[0])
    return replace(chosen, confidence=BIO_CONFIDENCE)


def fetch_about_text(seed: ChannelSeed, timeout: int = 10) -> str:
    url = about_page_url(seed)
    if not url:
        return ""
    RATE_LIMITER.wait()
    try:
        response = SESSION.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to load about page %s: %s", url, exc)
        return ""
    return html.unescape(response.text)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0)


class EmailFinder:
    """Looks for a contact address in the channel bio and its About page."""

    def __init__(
        self,
        fetch_about: Callable[[ChannelSeed], str] = fetch_about_text,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self._fetch_about = fetch_about
        self._clock = clock

    def find(self, seed: ChannelSeed) -> EmailLookup:
        logger.info("Starting email discovery for %s", seed.display_name)
        candidates = extract_emails(seed.description)
        known = {candidate.address.lower() for candidate in candidates}
        for candidate in extract_emails(self._fetch_about(seed)):
            if candidate.address.lower() not in known:
                known.add(candidate.address.lower())
                candidates.append(candidate)

        best = select_best(candidates)
        if best is None:
            logger.info("No email found for %s", seed.display_name)
            return EmailLookup(
                email=None,
                business_email=None,
                confidence=0.0,
                source=SOURCE_NONE,
                alternative_emails=[],
                last_checked=self._clock(),
            )

        logger.info("Found email for %s: %s", seed.display_name, best.address)
        alternatives = [
            candidate.address for candidate in candidates if candidate.address != best.address
        ][:MAX_ALTERNATIVES]
        return EmailLookup(
            email=best.address,
            business_email=best.address if best.is_business_like else None,
            confidence=best.confidence,
            source=SOURCE_BIO,
            alternative_emails=alternatives,
            last_checked=self._clock(),
        )
