"""Dashboard, chart and history views over the food log."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from calai.domain.logs import FoodLogEntry
from calai.domain.stats import AggregateBucket, DayHistory, MacroTotals
from calai.rounding import round_int
from calai.services.aggregation import (
    aggregate,
    by_day,
    by_meal_type,
    day_of_month_label,
    in_days,
    local_day,
    same_day,
    since,
    summarize,
    sum_totals,
    weekday_label,
)

WEEK_DAYS = 7
EXTENDED_DAYS = 14


@dataclass
class ChartSummary:
    """Chart buckets with their total and average."""

    range: str
    metric: str
    buckets: list[AggregateBucket]
    total: int
    average: int


@dataclass
class StatsService:
    """Computes views in the user's timezone."""

    timezone_name: str = "UTC"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    def now(self, now: datetime | None = None) -> datetime:
        """Return the reference instant in the user's timezone."""
        if now is None:
            return datetime.now(tz=self.tz)
        return now.astimezone(self.tz)

    def today_entries(
        self, entries: Iterable[FoodLogEntry], now: datetime | None = None
    ) -> list[FoodLogEntry]:
        """Return entries logged on today's local date."""
        predicate = same_day(self.now(now), self.tz)
        return [entry for entry in entries if predicate(entry)]

    def today_totals(
        self, entries: Iterable[FoodLogEntry], now: datetime | None = None
    ) -> MacroTotals:
        """Return today's totals."""
        return sum_totals(self.today_entries(entries, now))

    def day_view(
        self,
        entries: Iterable[FoodLogEntry],
        metric: str = "calories",
        now: datetime | None = None,
    ) -> ChartSummary:
        """Return today's metric split by meal type."""
        buckets = aggregate_today_by_meal(entries, self.now(now), self.tz, metric)
        return _chart("day", metric, buckets)

    def week_view(
        self,
        entries: Iterable[FoodLogEntry],
        metric: str = "calories",
        now: datetime | None = None,
    ) -> ChartSummary:
        """Return the metric per day for the 7 days ending today."""
        return self._days_view(
            "week", entries, metric, WEEK_DAYS, weekday_label, now
        )

    def extended_view(
        self,
        entries: Iterable[FoodLogEntry],
        metric: str = "calories",
        now: datetime | None = None,
    ) -> ChartSummary:
        """Return the metric per day for the 14 days ending today."""
        return self._days_view(
            "month", entries, metric, EXTENDED_DAYS, day_of_month_label, now
        )

    def chart(
        self,
        entries: Iterable[FoodLogEntry],
        range_name: str,
        metric: str = "calories",
        now: datetime | None = None,
    ) -> ChartSummary:
        """Dispatch to the view for `day`, `week` or `month`."""
        views = {
            "day": self.day_view,
            "week": self.week_view,
            "month": self.extended_view,
        }
        view = views.get(range_name)
        if view is None:
            raise ValueError(f"Unknown range: {range_name}")
        return view(entries, metric, now)

    def history(self, entries: Iterable[FoodLogEntry]) -> list[DayHistory]:
        """Group entries by local date, newest day and entry first."""
        ordered = sorted(entries, key=lambda entry: entry.logged_at, reverse=True)
        groups: dict[date, list[FoodLogEntry]] = {}
        for entry in ordered:
            groups.setdefault(local_day(entry, self.tz), []).append(entry)
        history = []
        for day, day_entries in groups.items():
            totals = sum_totals(day_entries)
            history.append(
                DayHistory(
                    day=day,
                    entries=day_entries,
                    calories=totals.calories,
                    protein_g=totals.protein_g,
                )
            )
        return history

    def weekly_average_calories(
        self, entries: Iterable[FoodLogEntry], now: datetime | None = None
    ) -> int:
        """Average daily calories over the trailing 7 x 24 hours."""
        predicate = since(self.now(now) - timedelta(days=WEEK_DAYS))
        recent = [entry for entry in entries if predicate(entry)]
        if not recent:
            return 0
        return round_int(sum_totals(recent).calories / WEEK_DAYS)

    def _days_view(  # noqa: PLR0913
        self,
        range_name: str,
        entries: Iterable[FoodLogEntry],
        metric: str,
        days: int,
        label: Callable[[date], str],
        now: datetime | None,
    ) -> ChartSummary:
        grouping = by_day(self.now(now).date(), days, self.tz, label)
        buckets = aggregate(
            entries, in_days(grouping.window(), self.tz), grouping, metric
        )
        return _chart(range_name, metric, buckets)


def aggregate_today_by_meal(
    entries: Iterable[FoodLogEntry], now: datetime, tz: ZoneInfo, metric: str
) -> list[AggregateBucket]:
    """Return one bucket per meal type for the local day of `now`."""
    return aggregate(entries, same_day(now, tz), by_meal_type(), metric)


def _chart(
    range_name: str, metric: str, buckets: list[AggregateBucket]
) -> ChartSummary:
    summary = summarize(buckets)
    return ChartSummary(
        range=range_name,
        metric=metric,
        buckets=buckets,
        total=summary.total,
        average=summary.average,
    )
