"""
Registry of bot signatures.

A PatternCatalog is an immutable value: user-agent signatures, known bot
IP prefixes and behavioral thresholds. Classifiers receive one at
construction; customizations produce a new catalog instead of mutating
shared state.
"""

import re
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Iterable, Optional

from ..config.constants import (
    BOT_IP_PREFIXES,
    BOT_USER_AGENT_PATTERNS,
    RAPID_REQUESTS_PER_MINUTE,
    SHORT_SESSION_DURATION_MS,
)


@dataclass(frozen=True)
class BehavioralThresholds:
    """Thresholds for the behavioral bot indicators."""

    rapid_requests_per_minute: int = RAPID_REQUESTS_PER_MINUTE
    short_session_duration_ms: int = SHORT_SESSION_DURATION_MS


@dataclass(frozen=True)
class PatternCatalog:
    """Bot signatures used by the classifier."""

    user_agent_patterns: tuple[str, ...] = tuple(BOT_USER_AGENT_PATTERNS)
    ip_prefixes: tuple[str, ...] = tuple(BOT_IP_PREFIXES)
    thresholds: BehavioralThresholds = field(default_factory=BehavioralThresholds)

    @classmethod
    def default(cls) -> "PatternCatalog":
        """Return the built-in catalog."""
        return DEFAULT_CATALOG

    @cached_property
    def compiled_user_agent_patterns(self) -> tuple[re.Pattern, ...]:
        """User-agent signatures compiled case-insensitively."""
        return tuple(re.compile(p, re.IGNORECASE) for p in self.user_agent_patterns)

    def match_user_agent(self, user_agent: str) -> Optional[str]:
        """
        Find the first signature matching a user-agent.

        Args:
            user_agent: The HTTP User-Agent header value

        Returns:
            The matching signature, or None
        """
        for source, pattern in zip(
            self.user_agent_patterns, self.compiled_user_agent_patterns
        ):
            if pattern.search(user_agent):
                return source
        return None

    def match_ip(self, ip: str) -> Optional[str]:
        """Return the first known bot prefix the IP starts with, or None."""
        for prefix in self.ip_prefixes:
            if ip.startswith(prefix):
                return prefix
        return None

    def extended(
        self,
        user_agent_patterns: Iterable[str] = (),
        ip_prefixes: Iterable[str] = (),
        rapid_requests_per_minute: Optional[int] = None,
        short_session_duration_ms: Optional[int] = None,
    ) -> "PatternCatalog":
        """
        Create a new catalog with additional signatures or thresholds.

        Args:
            user_agent_patterns: Extra regex signatures (case-insensitive)
            ip_prefixes: Extra IP address prefixes
            rapid_requests_per_minute: Override for the request-rate threshold
            short_session_duration_ms: Override for the short-session threshold

        Returns:
            New PatternCatalog; self is unchanged
        """
        thresholds = self.thresholds
        if rapid_requests_per_minute is not None:
            thresholds = replace(
                thresholds, rapid_requests_per_minute=rapid_requests_per_minute
            )
        if short_session_duration_ms is not None:
            thresholds = replace(
                thresholds, short_session_duration_ms=short_session_duration_ms
            )

        return PatternCatalog(
            user_agent_patterns=self.user_agent_patterns + tuple(user_agent_patterns),
            ip_prefixes=self.ip_prefixes + tuple(ip_prefixes),
            thresholds=thresholds,
        )


DEFAULT_CATALOG = PatternCatalog()
