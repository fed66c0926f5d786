"""Bucketed aggregation of food log entries.

Every query is recomputed from raw entries. Sums stay unrounded until the
bucket is emitted, and every bucket of a grouping is emitted even when empty.
"""

from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Protocol

from calai.domain.logs import MACRO_NAMES, MICRONUTRIENT_NAMES, FoodLogEntry, MealType
from calai.domain.stats import AggregateBucket, BucketSummary, MacroTotals
from calai.rounding import round_int

Predicate = Callable[[FoodLogEntry], bool]


def local_day(entry: FoodLogEntry, tz: tzinfo) -> date:
    """Return the calendar date of an entry in the given timezone."""
    return entry.logged_at.astimezone(tz).date()


def same_day(reference: datetime, tz: tzinfo) -> Predicate:
    """Match entries on the same local calendar date as the reference."""
    day = reference.astimezone(tz).date()
    return lambda entry: local_day(entry, tz) == day


def since(instant: datetime) -> Predicate:
    """Match entries logged at or after an instant."""
    return lambda entry: entry.logged_at >= instant


def in_days(days: Collection[date], tz: tzinfo) -> Predicate:
    """Match entries whose local date is one of the given days."""
    wanted = frozenset(days)
    return lambda entry: local_day(entry, tz) in wanted


def match_all(_entry: FoodLogEntry) -> bool:
    """Match every entry."""
    return True


class Grouping(Protocol):
    """Ordered set of buckets and the rule placing an entry in one."""

    def buckets(self) -> list[tuple[object, str]]:
        """Return (key, label) pairs in output order."""

    def key(self, entry: FoodLogEntry) -> object:
        """Return the bucket key for an entry."""


@dataclass(frozen=True)
class MealTypeGrouping:
    """One bucket per meal type in fixed meal order."""

    def buckets(self) -> list[tuple[object, str]]:
        return [(meal, meal.value.capitalize()) for meal in MealType]

    def key(self, entry: FoodLogEntry) -> object:
        return MealType(entry.meal_type)


def weekday_label(day: date) -> str:
    """Short weekday name, e.g. Mon."""
    return day.strftime("%a")


def day_of_month_label(day: date) -> str:
    """Day of month without padding."""
    return str(day.day)


@dataclass(frozen=True)
class DayGrouping:
    """One bucket per calendar day, oldest first, ending on `end_day`."""

    end_day: date
    days: int
    tz: tzinfo
    label: Callable[[date], str] = weekday_label

    def window(self) -> list[date]:
        """Return the days of the window in chronological order."""
        return [
            self.end_day - timedelta(days=offset)
            for offset in range(self.days - 1, -1, -1)
        ]

    def buckets(self) -> list[tuple[object, str]]:
        return [(day, self.label(day)) for day in self.window()]

    def key(self, entry: FoodLogEntry) -> object:
        return local_day(entry, self.tz)


def by_meal_type() -> MealTypeGrouping:
    """Group entries by meal type."""
    return MealTypeGrouping()


def by_day(
    end_day: date,
    days: int,
    tz: tzinfo,
    label: Callable[[date], str] = weekday_label,
) -> DayGrouping:
    """Group entries by local calendar day over a window ending on `end_day`."""
    if days < 1:
        raise ValueError("A day window needs at least one day")
    return DayGrouping(end_day=end_day, days=days, tz=tz, label=label)


def check_metric(metric: str) -> str:
    """Validate that a metric names a numeric entry field."""
    if metric not in MACRO_NAMES and metric not in MICRONUTRIENT_NAMES:
        raise ValueError(f"Unknown metric: {metric}")
    return metric


def aggregate(
    entries: Iterable[FoodLogEntry],
    predicate: Predicate,
    grouping: Grouping,
    metric: str,
) -> list[AggregateBucket]:
    """Sum a metric per bucket over the entries matching the predicate."""
    check_metric(metric)
    buckets = grouping.buckets()
    sums: dict[object, float] = {key: 0.0 for key, _ in buckets}
    for entry in entries:
        if not predicate(entry):
            continue
        key = grouping.key(entry)
        if key in sums:
            sums[key] += entry.metric(metric)
    return [
        AggregateBucket(label=label, value=round_int(sums[key]), raw_value=sums[key])
        for key, label in buckets
    ]


def summarize(buckets: Sequence[AggregateBucket]) -> BucketSummary:
    """Return the total of bucket values and their rounded average."""
    total = sum(bucket.value for bucket in buckets)
    if not buckets:
        return BucketSummary(total=0, average=0)
    return BucketSummary(total=total, average=round_int(total / len(buckets)))


def sum_totals(entries: Iterable[FoodLogEntry]) -> MacroTotals:
    """Sum calories and macros over entries."""
    calories = protein = carbs = fat = 0.0
    for entry in entries:
        calories += entry.calories
        protein += entry.protein_g
        carbs += entry.carbs_g
        fat += entry.fat_g
    return MacroTotals(calories=calories, protein_g=protein, carbs_g=carbs, fat_g=fat)
