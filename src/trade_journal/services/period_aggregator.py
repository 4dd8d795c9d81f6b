"""Roll days up into week-of-month and month buckets."""

from datetime import date, timedelta
from typing import Union

from trade_journal.domain.models import DayLedger, Ledger
from trade_journal.domain.views import MonthBucket, WeekBucket


def start_of_week(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def week_of_month(week_start: date, month_start: date) -> int:
    """1-based week number, counting weeks from the one holding the 1st."""
    return (week_start - start_of_week(month_start)).days // 7 + 1


def _fold_day(bucket: Union[WeekBucket, MonthBucket], day: DayLedger) -> None:
    bucket.profit = bucket.profit + day.profit
    bucket.has_holdings = bucket.has_holdings or day.has_holdings
    bucket.has_sells = bucket.has_sells or day.has_sells


def aggregate_periods(ledger: Ledger) -> list[MonthBucket]:
    """
    Group the ledger's days into months and weeks.

    A single chronological pass folds each day into its month and week,
    summing raw figures and OR-ing the holdings/sells flags. The result is
    ordered most recent first at every level: months, weeks within a
    month and days within a week.
    """
    months: dict[date, MonthBucket] = {}
    weeks: dict[tuple[date, date], WeekBucket] = {}

    for day in ledger.iter_days():
        month_start = day.date.replace(day=1)
        week_start = start_of_week(day.date)

        month = months.get(month_start)
        if month is None:
            month = MonthBucket(start=month_start)
            months[month_start] = month

        week = weeks.get((month_start, week_start))
        if week is None:
            week = WeekBucket(
                start=week_start,
                week_of_month=week_of_month(week_start, month_start),
            )
            weeks[(month_start, week_start)] = week
            month.weeks.append(week)

        _fold_day(month, day)
        _fold_day(week, day)
        week.days.append(day)

    ordered = list(months.values())
    for month in ordered:
        for week in month.weeks:
            week.days.reverse()
        month.weeks.reverse()
    ordered.reverse()
    return ordered
