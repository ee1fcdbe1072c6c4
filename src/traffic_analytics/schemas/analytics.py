"""
Analytics result schema.

All sections are read-only views derived once per ``process_logs`` call;
none of them hold references back to input entries.
"""

from dataclasses import asdict, dataclass, field
from typing import Optional

from ..sessions.reconstructor import SessionStats


@dataclass
class DateRange:
    """First and last timestamp seen, as ISO-8601 strings."""

    start: str
    end: str
    days: int


@dataclass
class OverviewMetrics:
    total_requests: int = 0
    total_bots: int = 0
    bot_percentage: float = 0.0
    date_range: Optional[DateRange] = None


@dataclass
class VisitorMetrics:
    """
    Unique visitor counts.

    ``recommended`` is the fingerprint count: IP alone over-counts with
    dynamic addressing and under-counts behind NAT.
    """

    by_ip: int = 0
    by_fingerprint: int = 0
    recommended: int = 0
    method: str = "IP + User-Agent fingerprinting"
    confidence: str = "medium"


@dataclass
class PageImpression:
    path: str
    impressions: int
    unique_visitors: int
    avg_views_per_visitor: float


@dataclass
class ImpressionMetrics:
    total: int = 0
    by_page: list[PageImpression] = field(default_factory=list)
    top_pages: list[PageImpression] = field(default_factory=list)


@dataclass
class PageViewStats:
    path: str
    views: int
    unique_visitors: int
    peak_hour: Optional[int]
    daily_average: float


@dataclass
class ReferrerCount:
    referrer: str
    visits: int
    unique_visitors: int


@dataclass
class ReferrerMetrics:
    total: int = 0
    top: list[ReferrerCount] = field(default_factory=list)
    all: list[ReferrerCount] = field(default_factory=list)


@dataclass
class DeviceMetrics:
    counts: dict[str, int] = field(default_factory=dict)
    percentages: dict[str, float] = field(default_factory=dict)


@dataclass
class BrowserCount:
    browser: str
    count: int
    percentage: float


@dataclass
class BrowserMetrics:
    total: int = 0
    breakdown: list[BrowserCount] = field(default_factory=list)
    top: list[BrowserCount] = field(default_factory=list)


@dataclass
class GeographyMetrics:
    countries: list[dict] = field(default_factory=list)
    cities: list[dict] = field(default_factory=list)


@dataclass
class TimelineMetrics:
    daily: list[dict] = field(default_factory=list)
    hourly: list[dict] = field(default_factory=list)
    weekday: list[dict] = field(default_factory=list)


@dataclass
class AnalyticsResult:
    """Full analytics reconstruction for one batch of log entries."""

    overview: OverviewMetrics = field(default_factory=OverviewMetrics)
    visitors: VisitorMetrics = field(default_factory=VisitorMetrics)
    impressions: ImpressionMetrics = field(default_factory=ImpressionMetrics)
    sessions: SessionStats = field(default_factory=SessionStats)
    pages: list[PageViewStats] = field(default_factory=list)
    referrers: ReferrerMetrics = field(default_factory=ReferrerMetrics)
    devices: DeviceMetrics = field(default_factory=DeviceMetrics)
    browsers: BrowserMetrics = field(default_factory=BrowserMetrics)
    geography: GeographyMetrics = field(default_factory=GeographyMetrics)
    timeline: TimelineMetrics = field(default_factory=TimelineMetrics)
    # Stages that failed and fell back to their empty default
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return asdict(self)
