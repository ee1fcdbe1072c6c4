"""
Bot classification for access-log requests.

Runs an ordered list of checkers over a request; the first checker that
returns a verdict wins and later checkers are not evaluated:

1. user-agent signature (confidence 95)
2. known bot IP prefix (confidence 85)
3. behavioral scoring of a session summary (bot when score >= 50)

A request no checker flags is not a bot, with confidence 0.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from ..config.constants import (
    BEHAVIOR_WEIGHTS,
    BEHAVIORAL_BOT_THRESHOLD,
    HIGH_REQUEST_COUNT,
    IP_RANGE_CONFIDENCE,
    REFERER_REQUEST_COUNT,
    USER_AGENT_CONFIDENCE,
)
from .catalog import PatternCatalog

logger = logging.getLogger(__name__)


class DetectionMethod(str, Enum):
    """Signal that produced a bot verdict."""

    USER_AGENT = "user-agent"
    IP_RANGE = "ip-range"
    BEHAVIORAL = "behavioral"


@dataclass(frozen=True)
class ClassificationVerdict:
    """Result of bot classification."""

    is_bot: bool
    confidence: int = 0
    method: Optional[DetectionMethod] = None
    reasons: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_bot": self.is_bot,
            "confidence": self.confidence,
            "method": self.method.value if self.method else None,
            "reasons": list(self.reasons),
        }


NOT_A_BOT = ClassificationVerdict(is_bot=False)


_TRUE_STRINGS = {"true", "1", "yes"}


def _as_number(value: Any) -> Optional[float]:
    """Coerce a session metric to float; None when absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_flag(value: Any) -> bool:
    """Coerce a session flag; strings such as "false" are not truthy."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


@dataclass(frozen=True)
class BehaviorSummary:
    """Behavioral summary of a visitor's session, when upstream data has one."""

    requests_per_minute: Optional[float] = None
    duration_ms: Optional[float] = None
    has_javascript: bool = False
    access_pattern: Optional[str] = None
    perfect_timing: bool = False
    error_rate: Optional[float] = None
    request_count: int = 0
    accept_language: Optional[str] = None
    referer: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BehaviorSummary":
        """Create from a session mapping with camelCase or snake_case keys."""

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return None

        headers = pick("headers")
        if not isinstance(headers, Mapping):
            headers = {}
        access_pattern = pick("accessPattern", "access_pattern")

        return cls(
            requests_per_minute=_as_number(
                pick("requestsPerMinute", "requests_per_minute")
            ),
            duration_ms=_as_number(pick("duration", "duration_ms")),
            has_javascript=_as_flag(pick("hasJavaScript", "has_javascript")),
            access_pattern=access_pattern if isinstance(access_pattern, str) else None,
            perfect_timing=_as_flag(pick("perfectTiming", "perfect_timing")),
            error_rate=_as_number(pick("errorRate", "error_rate")),
            request_count=int(_as_number(pick("requestCount", "request_count")) or 0),
            accept_language=headers.get("acceptLanguage")
            or headers.get("accept_language"),
            referer=headers.get("referer") or headers.get("referrer"),
        )


@dataclass(frozen=True)
class BotRequest:
    """The request fields the classifier looks at."""

    user_agent: Any = None
    ip: Optional[str] = None
    session: Optional[BehaviorSummary] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BotRequest":
        """Create from a mapping with ``userAgent``/``ip``/``session`` keys."""
        session = data.get("session")
        if isinstance(session, Mapping):
            session = BehaviorSummary.from_dict(session)
        elif not isinstance(session, BehaviorSummary):
            session = None

        user_agent = data.get("userAgent", data.get("user_agent"))
        return cls(user_agent=user_agent, ip=data.get("ip"), session=session)


@dataclass
class BehaviorScore:
    """Accumulated behavioral score."""

    confidence: int = 0
    reasons: list[str] = field(default_factory=list)

    def add(self, weight_key: str, reason: str) -> None:
        self.confidence += BEHAVIOR_WEIGHTS[weight_key]
        self.reasons.append(reason)

    @property
    def is_bot(self) -> bool:
        return self.confidence >= BEHAVIORAL_BOT_THRESHOLD


def is_bot_user_agent(
    user_agent: Any, catalog: Optional[PatternCatalog] = None
) -> bool:
    """
    Check if a user-agent is a bot.

    A missing, empty or non-string user-agent counts as a bot.

    Examples:
        >>> is_bot_user_agent("Googlebot/2.1")
        True
        >>> is_bot_user_agent(None)
        True
    """
    if not user_agent or not isinstance(user_agent, str):
        return True
    catalog = catalog or PatternCatalog.default()
    return catalog.match_user_agent(user_agent) is not None


def is_bot_ip(ip: Optional[str], catalog: Optional[PatternCatalog] = None) -> bool:
    """Check if an IP address starts with a known bot prefix."""
    if not ip or not isinstance(ip, str):
        return False
    catalog = catalog or PatternCatalog.default()
    return catalog.match_ip(ip) is not None


def analyze_behavior(
    session: BehaviorSummary, catalog: Optional[PatternCatalog] = None
) -> BehaviorScore:
    """
    Score a session summary against the behavioral indicators.

    Args:
        session: Behavioral summary of the visitor's session
        catalog: Catalog providing thresholds (default: built-in)

    Returns:
        BehaviorScore with accumulated confidence and triggered reasons
    """
    thresholds = (catalog or PatternCatalog.default()).thresholds
    score = BehaviorScore()

    if (
        session.requests_per_minute is not None
        and session.requests_per_minute > thresholds.rapid_requests_per_minute
    ):
        score.add("rapid_requests", "Excessive request rate")

    if (
        session.duration_ms is not None
        and session.duration_ms < thresholds.short_session_duration_ms
    ):
        score.add("short_session", "Suspiciously short session")

    if not session.has_javascript:
        score.add("no_javascript", "No JavaScript execution detected")

    if session.access_pattern == "sequential" and session.perfect_timing:
        score.add("perfect_sequential", "Perfect sequential access pattern")

    if session.error_rate == 0 and session.request_count > HIGH_REQUEST_COUNT:
        score.add("zero_error_rate", "Zero error rate with high request count")

    if not session.accept_language:
        score.add("missing_accept_language", "Missing Accept-Language header")

    if not session.referer and session.request_count > REFERER_REQUEST_COUNT:
        score.add("missing_referer", "Missing Referer header on multiple requests")

    return score


Checker = Callable[[BotRequest], Optional[ClassificationVerdict]]


class BotClassifier:
    """
    Rule-based bot classifier.

    Usage:
        classifier = BotClassifier()
        verdict = classifier.classify({"userAgent": "Googlebot/2.1"})
        verdict.method  # DetectionMethod.USER_AGENT
    """

    def __init__(self, catalog: Optional[PatternCatalog] = None):
        """
        Initialize the classifier.

        Args:
            catalog: Bot signatures and thresholds (default: built-in catalog)
        """
        self.catalog = catalog or PatternCatalog.default()
        self.checkers: list[Checker] = [
            self.check_user_agent,
            self.check_ip_range,
            self.check_behavior,
        ]

    def check_user_agent(self, request: BotRequest) -> Optional[ClassificationVerdict]:
        """Flag requests with a missing or bot user-agent."""
        user_agent = request.user_agent
        if not user_agent or not isinstance(user_agent, str):
            reason = "Missing user-agent"
        else:
            signature = self.catalog.match_user_agent(user_agent)
            if signature is None:
                return None
            reason = f"Bot user-agent detected ({signature})"

        return ClassificationVerdict(
            is_bot=True,
            confidence=USER_AGENT_CONFIDENCE,
            method=DetectionMethod.USER_AGENT,
            reasons=(reason,),
        )

    def check_ip_range(self, request: BotRequest) -> Optional[ClassificationVerdict]:
        """Flag requests from a known bot IP prefix."""
        if not request.ip or not isinstance(request.ip, str):
            return None

        prefix = self.catalog.match_ip(request.ip)
        if prefix is None:
            return None

        return ClassificationVerdict(
            is_bot=True,
            confidence=IP_RANGE_CONFIDENCE,
            method=DetectionMethod.IP_RANGE,
            reasons=(f"IP from known bot range ({prefix})",),
        )

    def check_behavior(self, request: BotRequest) -> Optional[ClassificationVerdict]:
        """Flag requests whose session summary scores as automated."""
        if request.session is None:
            return None

        score = analyze_behavior(request.session, self.catalog)
        if not score.is_bot:
            return None

        return ClassificationVerdict(
            is_bot=True,
            confidence=score.confidence,
            method=DetectionMethod.BEHAVIORAL,
            reasons=tuple(score.reasons),
        )

    def classify(self, request: Any) -> ClassificationVerdict:
        """
        Classify a request.

        Args:
            request: BotRequest, or a mapping with ``userAgent``, optional
                ``ip`` and optional ``session`` keys

        Returns:
            ClassificationVerdict from the first checker that fires,
            or a not-a-bot verdict
        """
        if not isinstance(request, BotRequest):
            request = BotRequest.from_dict(request)

        for checker in self.checkers:
            verdict = checker(request)
            if verdict is not None:
                return verdict

        return NOT_A_BOT


def classify(
    request: Any, catalog: Optional[PatternCatalog] = None
) -> ClassificationVerdict:
    """Classify a single request with a one-off classifier."""
    return BotClassifier(catalog).classify(request)
