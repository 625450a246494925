"""Report Generation - Pure functions for summarizing days over a window.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date
from typing import Iterable

from .errors import DuplicateDay
from .intake import check_entry
from .models import DailyEntry, DateWindow, DayBalance, RangeReport
from .units import round_half_up


def calculate_remaining(target: int, consumed: int) -> int:
    """Budget left for the day, clamped at zero.

    An overage shows up as consumed > target, never as negative remaining.
    """
    return max(0, target - consumed)


def summarize_day(day: DailyEntry) -> DayBalance:
    """Generate the balance record for a single day.

    Raises:
        InvalidQuantity: If the day holds an entry that add_entry would reject
    """
    for meal in day.meals:
        for entry in meal.entries:
            check_entry(entry)

    consumed = round_half_up(day.total_calories)

    return DayBalance(
        date=day.log_date.isoformat(),
        consumed=consumed,
        target=day.target_calories,
        remaining=calculate_remaining(day.target_calories, consumed),
    )


def _index_by_date(days: Iterable[DailyEntry], window: DateWindow) -> dict[date, DailyEntry]:
    by_date: dict[date, DailyEntry] = {}
    for day in days:
        if not window.contains(day.log_date):
            continue
        if day.log_date in by_date:
            raise DuplicateDay(f"More than one entry for {day.log_date.isoformat()}")
        by_date[day.log_date] = day
    return by_date


def summarize_range(
    days: Iterable[DailyEntry],
    window: DateWindow,
    default_target: int,
) -> list[DayBalance]:
    """Produce one balance per calendar day in the window, oldest first.

    Args:
        days: Logged days in any order (days outside the window are ignored)
        window: Inclusive date range to cover
        default_target: Target for days with nothing logged

    Returns:
        List of DayBalance, one per day in the window

    Raises:
        DuplicateDay: If two logged days share a date inside the window
    """
    by_date = _index_by_date(days, window)

    balances = []
    for current in window.days():
        day = by_date.get(current)
        if day is None:
            balances.append(
                DayBalance(
                    date=current.isoformat(),
                    consumed=0,
                    target=default_target,
                    remaining=calculate_remaining(default_target, 0),
                )
            )
        else:
            balances.append(summarize_day(day))
    return balances


def generate_range_report(
    days: Iterable[DailyEntry],
    window: DateWindow,
    default_target: int,
) -> RangeReport:
    """Generate aggregate figures for a window of days.

    Args:
        days: Logged days (may be empty or partial)
        window: Inclusive date range to cover
        default_target: Target for days with nothing logged

    Returns:
        RangeReport with per-day balances and totals
    """
    days = list(days)
    balances = summarize_range(days, window, default_target)

    # A day counts as logged once it holds at least one entry
    days_logged = sum(
        1
        for day in days
        if window.contains(day.log_date) and any(m.entries for m in day.meals)
    )

    total_consumed = sum(b.consumed for b in balances)
    total_target = sum(b.target for b in balances)
    avg_daily_consumed = total_consumed / days_logged if days_logged > 0 else 0

    return RangeReport(
        start=window.start,
        end=window.end,
        balances=balances,
        total_consumed=total_consumed,
        total_target=total_target,
        days_logged=days_logged,
        avg_daily_consumed=round(avg_daily_consumed, 1),
        net_balance=total_consumed - total_target,
    )
