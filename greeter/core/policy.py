"""Content policy for the greeting endpoint: keyword filter, topic lock, closing phrase."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, List, Mapping, Optional, Sequence

from greeter.core.prompt import (
    CLOSING_PHRASE_ARABIC,
    CLOSING_PHRASE_ENGLISH,
    DIVIDER,
    EID_HADITHS,
    EID_QURAN_VERSES,
    REFUSAL_SENTINEL,
    TONE_INSTRUCTIONS,
    Citation,
)


BLOCKED_KEYWORDS: List[str] = [
    "password", "hack", "credit card", "bank", "account", "attack", "exploit",
    "vulnerable", "steal", "scam", "illegal", "drugs", "weapon", "violence",
    "politics", "porn", "sex", "nude", "casino", "gambling", "bitcoin", "crypto",
    "investment", "money", "fraud", "malware", "virus", "trojan", "phishing",
    "script", "admin", "ssh", "login", "credentials",
]


def contains_blocked_content(text: str, keywords: Sequence[str] = BLOCKED_KEYWORDS) -> bool:
    normalized = text.lower()
    return any(keyword.lower() in normalized for keyword in keywords)


def is_refusal(text: str) -> bool:
    return REFUSAL_SENTINEL in text


def has_closing_phrase(text: str) -> bool:
    return CLOSING_PHRASE_ARABIC in text or CLOSING_PHRASE_ENGLISH.rstrip(".").lower() in text.lower()


def ensure_closing_phrase(text: str) -> str:
    """Append the decorated closing block unless the phrase is already there."""
    if has_closing_phrase(text):
        return text
    return f"{text}\n\n{DIVIDER}\n{CLOSING_PHRASE_ARABIC}\n{CLOSING_PHRASE_ENGLISH}\n{DIVIDER}"


@dataclass
class GreetingPolicy:
    """Quota thresholds, filters and few-shot data injected into the handler."""

    requests_per_window: int = 5
    window_seconds: int = 60 * 60
    block_seconds: int = 24 * 60 * 60
    blocked_keywords: List[str] = field(default_factory=lambda: list(BLOCKED_KEYWORDS))
    quran_examples: List[Citation] = field(default_factory=lambda: list(EID_QURAN_VERSES))
    hadith_examples: List[Citation] = field(default_factory=lambda: list(EID_HADITHS))
    tone_instructions: Mapping[str, str] = field(default_factory=lambda: dict(TONE_INSTRUCTIONS))
    # Swappable predicates. None means the keyword filter over blocked_keywords.
    violation_check: Optional[Callable[[str], bool]] = None
    refusal_check: Callable[[str], bool] = is_refusal

    def __post_init__(self) -> None:
        if self.violation_check is None:
            self.violation_check = partial(contains_blocked_content, keywords=self.blocked_keywords)

    def is_policy_violation(self, text: str) -> bool:
        return self.violation_check(text)

    def is_refusal(self, text: str) -> bool:
        return self.refusal_check(text)
