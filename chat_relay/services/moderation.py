"""Prompt moderation filter.

Runs an ordered list of cheap, synchronous checks over user text before it is
forwarded upstream. The first failing check decides the rejection reason.
No I/O and no state: the same input always yields the same result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from chat_relay.core.config import DEFAULT_BLOCKED_WORDS, ModerationSettings

_URL_PATTERN = re.compile(r"https?://\S+", re.IGNORECASE)


class RejectionReason(str, Enum):
    """Why a prompt was refused. The value is the caller-facing message."""

    INVALID = "Invalid prompt"
    TOO_LONG = "Prompt too long"
    TOO_SHORT = "Prompt too short"
    BLOCKED = "Blocked content"
    REPETITION = "Excessive repetition"
    TOO_MANY_URLS = "Too many URLs"

    @property
    def code(self) -> str:
        return f"prompt_{self.name.lower()}"


def parse_word_list(words: str | None) -> frozenset[str]:
    """Parse a comma-separated word list into a lower-cased set.

    Examples:
        >>> sorted(parse_word_list("Spam, hack ,,virus"))
        ['hack', 'spam', 'virus']
    """
    if not words:
        return frozenset()
    return frozenset(w.strip().lower() for w in words.split(",") if w.strip())


@dataclass(frozen=True)
class ModerationPolicy:
    """Thresholds applied by :func:`validate`."""

    min_length: int = 3
    max_length: int = 200
    max_repeated_chars: int = 10
    max_urls: int = 2
    blocked_words: frozenset[str] = field(
        default_factory=lambda: parse_word_list(DEFAULT_BLOCKED_WORDS)
    )

    @classmethod
    def from_settings(cls, cfg: ModerationSettings) -> "ModerationPolicy":
        return cls(
            min_length=cfg.min_length,
            max_length=cfg.max_length,
            max_repeated_chars=cfg.max_repeated_chars,
            max_urls=cfg.max_urls,
            blocked_words=parse_word_list(cfg.blocked_words),
        )

    @property
    def repetition_pattern(self) -> re.Pattern[str]:
        return re.compile(r"(.)\1{%d,}" % self.max_repeated_chars, re.DOTALL)


DEFAULT_POLICY = ModerationPolicy()


def validate(text: Any, policy: ModerationPolicy = DEFAULT_POLICY) -> RejectionReason | None:
    """Check user text against the moderation policy.

    Args:
        text: Raw value taken from the request body. Anything that is not a
            non-blank string is rejected as invalid.
        policy: Thresholds and blocklist to apply.

    Returns:
        None when the text may be forwarded, otherwise the first failing
        RejectionReason in this order: invalid, too long, too short,
        blocked word, repeated character run, too many URLs.
    """
    if not isinstance(text, str) or not text:
        return RejectionReason.INVALID

    if len(text) > policy.max_length:
        return RejectionReason.TOO_LONG

    if len(text) < policy.min_length:
        return RejectionReason.TOO_SHORT

    lowered = text.lower()
    if any(word in lowered for word in policy.blocked_words):
        return RejectionReason.BLOCKED

    if policy.repetition_pattern.search(text):
        return RejectionReason.REPETITION

    if len(_URL_PATTERN.findall(text)) > policy.max_urls:
        return RejectionReason.TOO_MANY_URLS

    return None
