"""
Traffic metrics aggregation.

Computes visitor, impression, page, referrer, device, browser, geography
and timeline breakdowns from legitimate log entries. Entries are
flattened once into a DataFrame keyed by visitor fingerprint; each
breakdown is a read-only view over that frame.
"""

import logging
import math
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

from ..config.constants import (
    TOP_BROWSERS_LIMIT,
    TOP_LOCATIONS_LIMIT,
    TOP_PAGES_LIMIT,
    TOP_REFERRERS_LIMIT,
    UNKNOWN_LOCATION,
    WEEKDAY_NAMES,
)
from ..ingestion.schema import get_field
from ..schemas.analytics import (
    BrowserCount,
    BrowserMetrics,
    DateRange,
    DeviceMetrics,
    GeographyMetrics,
    ImpressionMetrics,
    PageImpression,
    PageViewStats,
    ReferrerCount,
    ReferrerMetrics,
    TimelineMetrics,
    VisitorMetrics,
)
from ..utils.fingerprint import create_fingerprint
from ..utils.stats import mean, percentage, safe_ratio
from ..utils.timestamps import parse_timestamp, to_iso
from ..utils.url_utils import extract_referrer_host, normalize_path
from ..utils.user_agent import DEVICE_TYPES, detect_browser, detect_device

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "visitor_id",
    "ip",
    "path",
    "referrer",
    "device",
    "browser",
    "country",
    "city",
    "timestamp",
]


def _ranked(df: pd.DataFrame, count_col: str, key_col: str) -> pd.DataFrame:
    """Sort by count descending, breaking ties by key ascending."""
    return df.sort_values([count_col, key_col], ascending=[False, True])


class MetricsAggregator:
    """
    Computes traffic breakdowns for legitimate log entries.

    Usage:
        aggregator = MetricsAggregator()
        frame = aggregator.build_frame(entries)
        impressions = aggregator.calculate_impressions(frame)
    """

    def __init__(
        self,
        top_pages_limit: int = TOP_PAGES_LIMIT,
        top_referrers_limit: int = TOP_REFERRERS_LIMIT,
        top_browsers_limit: int = TOP_BROWSERS_LIMIT,
        top_locations_limit: int = TOP_LOCATIONS_LIMIT,
    ):
        self.top_pages_limit = top_pages_limit
        self.top_referrers_limit = top_referrers_limit
        self.top_browsers_limit = top_browsers_limit
        self.top_locations_limit = top_locations_limit

    def build_frame(self, entries: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
        """
        Flatten log entries into one row per entry.

        Malformed fields degrade per record: bad timestamps become NaT,
        bad paths "/", bad referrers "Direct".

        Args:
            entries: Legitimate LogEntry mappings

        Returns:
            DataFrame with FRAME_COLUMNS
        """
        columns: dict[str, list] = {name: [] for name in FRAME_COLUMNS}

        for entry in entries:
            ip = get_field(entry, "ip")
            user_agent = get_field(entry, "user_agent")
            columns["visitor_id"].append(create_fingerprint(ip, user_agent))
            columns["ip"].append(ip)
            columns["path"].append(normalize_path(get_field(entry, "path")))
            columns["referrer"].append(
                extract_referrer_host(get_field(entry, "referrer"))
            )
            columns["device"].append(detect_device(user_agent))
            columns["browser"].append(detect_browser(user_agent))
            columns["country"].append(get_field(entry, "country") or UNKNOWN_LOCATION)
            columns["city"].append(get_field(entry, "city") or UNKNOWN_LOCATION)
            columns["timestamp"].append(parse_timestamp(get_field(entry, "timestamp")))

        df = pd.DataFrame({k: v for k, v in columns.items() if k != "timestamp"})
        df["timestamp"] = pd.to_datetime(
            pd.Series(columns["timestamp"], dtype="object"), utc=True
        )
        return df

    # -------------------------------------------------------------------------
    # Breakdowns
    # -------------------------------------------------------------------------

    def calculate_visitors(self, df: pd.DataFrame) -> VisitorMetrics:
        """Count unique visitors by raw IP and by fingerprint."""
        by_fingerprint = int(df["visitor_id"].nunique())
        return VisitorMetrics(
            by_ip=int(df["ip"].nunique()),
            by_fingerprint=by_fingerprint,
            recommended=by_fingerprint,
        )

    def calculate_impressions(self, df: pd.DataFrame) -> ImpressionMetrics:
        """Count page views per normalized path."""
        if df.empty:
            return ImpressionMetrics()

        grouped = (
            df.groupby("path")
            .agg(
                impressions=("visitor_id", "size"),
                unique_visitors=("visitor_id", "nunique"),
            )
            .reset_index()
        )

        pages = [
            PageImpression(
                path=row.path,
                impressions=int(row.impressions),
                unique_visitors=int(row.unique_visitors),
                avg_views_per_visitor=round(
                    safe_ratio(row.impressions, row.unique_visitors), 2
                ),
            )
            for row in _ranked(grouped, "impressions", "path").itertuples(index=False)
        ]

        return ImpressionMetrics(
            total=len(df),
            by_page=pages,
            top_pages=pages[: self.top_pages_limit],
        )

    def calculate_page_views(self, df: pd.DataFrame) -> list[PageViewStats]:
        """Per-page views with peak hour and average views per active day."""
        pages = []

        for path, group in df.groupby("path"):
            timestamps = group["timestamp"].dropna()
            if timestamps.empty:
                peak_hour = None
                daily_average = 0.0
            else:
                by_hour = timestamps.dt.hour.value_counts().sort_index()
                peak_hour = int(by_hour.idxmax())
                by_day = timestamps.dt.strftime("%Y-%m-%d").value_counts()
                daily_average = round(mean(by_day.tolist()), 2)

            pages.append(
                PageViewStats(
                    path=path,
                    views=len(group),
                    unique_visitors=int(group["visitor_id"].nunique()),
                    peak_hour=peak_hour,
                    daily_average=daily_average,
                )
            )

        return sorted(pages, key=lambda p: (-p.views, p.path))

    def calculate_referrers(self, df: pd.DataFrame) -> ReferrerMetrics:
        """Group visits by referrer hostname ("Direct" when absent)."""
        if df.empty:
            return ReferrerMetrics()

        grouped = (
            df.groupby("referrer")
            .agg(
                visits=("visitor_id", "size"),
                unique_visitors=("visitor_id", "nunique"),
            )
            .reset_index()
        )

        referrers = [
            ReferrerCount(
                referrer=row.referrer,
                visits=int(row.visits),
                unique_visitors=int(row.unique_visitors),
            )
            for row in _ranked(grouped, "visits", "referrer").itertuples(index=False)
        ]

        return ReferrerMetrics(
            total=len(referrers),
            top=referrers[: self.top_referrers_limit],
            all=referrers,
        )

    def calculate_devices(self, df: pd.DataFrame) -> DeviceMetrics:
        """Count entries per device type."""
        value_counts = df["device"].value_counts()
        counts = {device: int(value_counts.get(device, 0)) for device in DEVICE_TYPES}
        total = len(df)

        return DeviceMetrics(
            counts=counts,
            percentages={
                device: percentage(count, total) for device, count in counts.items()
            },
        )

    def calculate_browsers(self, df: pd.DataFrame) -> BrowserMetrics:
        """Count entries per browser family."""
        if df.empty:
            return BrowserMetrics()

        grouped = df["browser"].value_counts().rename("count").reset_index()
        grouped.columns = ["browser", "count"]
        total = len(df)

        ranked = _ranked(grouped, "count", "browser")
        breakdown = [
            BrowserCount(
                browser=browser,
                count=int(count),
                percentage=percentage(count, total),
            )
            for browser, count in zip(ranked["browser"], ranked["count"])
        ]

        return BrowserMetrics(
            total=len(breakdown),
            breakdown=breakdown,
            top=breakdown[: self.top_browsers_limit],
        )

    def calculate_geography(self, df: pd.DataFrame) -> GeographyMetrics:
        """Tally pass-through country/city fields."""
        return GeographyMetrics(
            countries=self._top_locations(df, "country"),
            cities=self._top_locations(df, "city"),
        )

    def _top_locations(self, df: pd.DataFrame, column: str) -> list[dict]:
        if df.empty:
            return []

        grouped = df[column].value_counts().rename("count").reset_index()
        grouped.columns = [column, "count"]
        ranked = _ranked(grouped, "count", column).head(self.top_locations_limit)

        return [
            {column: name, "count": int(count)}
            for name, count in zip(ranked[column], ranked["count"])
        ]

    def calculate_timeline(self, df: pd.DataFrame) -> TimelineMetrics:
        """Bucket entries by UTC calendar day, hour of day and day of week."""
        timestamps = df["timestamp"].dropna()

        by_day = timestamps.dt.strftime("%Y-%m-%d").value_counts().sort_index()
        by_hour = timestamps.dt.hour.value_counts()
        # pandas counts Monday as 0; buckets start on Sunday
        by_weekday = ((timestamps.dt.dayofweek + 1) % 7).value_counts()

        return TimelineMetrics(
            daily=[
                {"date": day, "count": int(count)} for day, count in by_day.items()
            ],
            hourly=[
                {"hour": hour, "count": int(by_hour.get(hour, 0))}
                for hour in range(24)
            ],
            weekday=[
                {"day": name, "count": int(by_weekday.get(index, 0))}
                for index, name in enumerate(WEEKDAY_NAMES)
            ],
        )

    def get_date_range(self, df: pd.DataFrame) -> Optional[DateRange]:
        """First/last valid timestamp; None when there are none."""
        timestamps = df["timestamp"].dropna()
        if timestamps.empty:
            return None

        start = timestamps.min()
        end = timestamps.max()
        return DateRange(
            start=to_iso(start),
            end=to_iso(end),
            days=math.ceil((end - start).total_seconds() / 86400),
        )
