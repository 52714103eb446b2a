"""
Dashboard snapshot aggregation over license and publication records.
"""

from __future__ import annotations

import calendar
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from licdash.common.models import (
    ChartDataPoint,
    DashboardSnapshot,
    LicenseRecord,
    LicenseStatus,
    NameCount,
    Publication,
)

CONTENT_TYPE_NAMES = {
    "application/epub+zip": "EPUB",
    "application/pdf": "PDF",
    "application/pdf+lcp": "PDF",
    "application/audiobook+zip": "Audiobooks",
    "application/audiobook+lcp": "Audiobooks",
    "application/divina+zip": "Comics",
    "application/divina+lcp": "Comics",
}

CHART_MONTHS = 12


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _month_buckets(now: datetime, months: int = CHART_MONTHS) -> list[tuple[int, int]]:
    """(year, month) pairs for the last ``months`` months, oldest first."""
    year, month = now.year, now.month
    buckets = []
    for _ in range(months):
        buckets.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    buckets.reverse()
    return buckets


def _publication_types(publications: Iterable[Publication]) -> list[NameCount]:
    counts = Counter(
        CONTENT_TYPE_NAMES.get(p.content_type, p.content_type) for p in publications
    )
    return [
        NameCount(name=name, count=count)
        for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def _license_statuses(licenses: Iterable[LicenseRecord]) -> list[NameCount]:
    counts = Counter(lic.status for lic in licenses)
    return [
        NameCount(name=status.value.capitalize(), count=counts.get(status, 0))
        for status in LicenseStatus
    ]


def build_snapshot(
    licenses: list[LicenseRecord],
    publications: list[Publication],
    overshared_count: int,
    now: datetime,
) -> DashboardSnapshot:
    """Compute the dashboard aggregates as of ``now``."""
    now = _aware(now)
    issued = sorted(_aware(lic.created_at) for lic in licenses if lic.created_at)

    def issued_since(delta: timedelta) -> int:
        threshold = now - delta
        return sum(1 for ts in issued if threshold <= ts <= now)

    buckets = _month_buckets(now)
    per_month = Counter((ts.year, ts.month) for ts in issued if ts <= now)
    chart = [
        ChartDataPoint(month=calendar.month_abbr[month], licenses=per_month.get((year, month), 0))
        for year, month in buckets
    ]

    return DashboardSnapshot(
        total_publications=len(publications),
        total_users=len({lic.user_id for lic in licenses}),
        total_licenses=len(licenses),
        licenses_last_12_months=issued_since(timedelta(days=365)),
        licenses_last_month=issued_since(timedelta(days=30)),
        licenses_last_week=issued_since(timedelta(days=7)),
        licenses_last_day=issued_since(timedelta(days=1)),
        oldest_license_date=issued[0].date() if issued else None,
        latest_license_date=issued[-1].date() if issued else None,
        overshared_licenses_count=overshared_count,
        publication_types=_publication_types(publications),
        license_statuses=_license_statuses(licenses),
        chart_data=chart,
    )
