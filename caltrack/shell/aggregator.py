"""Intake Aggregator - In-memory coordinator for per-user day logs.

Holds the current estimate and the logged days for each user, and wires the
estimate's target into newly opened days. All arithmetic lives in the core
module; this layer only owns state and locking.

Each DailyEntry is one unit of mutual exclusion: a mutation takes that day's
lock, computes the new day with the pure core functions, and swaps it in.
A rejected call raises before the swap, leaving the stored day unchanged.
"""

import logging
import threading
from datetime import date

from ..core import intake
from ..core.energy import estimate
from ..core.models import (
    BiometricProfile,
    DailyEntry,
    DateWindow,
    DayBalance,
    EnergyEstimate,
    FoodEntry,
    MealType,
    RangeReport,
)
from ..core.reports import generate_range_report, summarize_range
from .config import AggregatorConfig


logger = logging.getLogger(__name__)


class IntakeAggregator:
    """Tracks logged days per user against their calorie target.

    Layout per user:
        estimate: EnergyEstimate from the latest profile
        days/{YYYY-MM-DD}: DailyEntry
    """

    def __init__(self, config: AggregatorConfig | None = None) -> None:
        """Initialize an empty aggregator.

        Args:
            config: Aggregator configuration
        """
        self.config = config or AggregatorConfig()
        self._estimates: dict[str, EnergyEstimate] = {}
        self._days: dict[str, dict[date, DailyEntry]] = {}
        self._day_locks: dict[tuple[str, date], threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, user_id: str, log_date: date) -> threading.Lock:
        """Get the lock guarding one user's day, creating it on first use."""
        with self._registry_lock:
            return self._day_locks.setdefault((user_id, log_date), threading.Lock())

    def _stored_day(self, user_id: str, log_date: date) -> DailyEntry | None:
        with self._registry_lock:
            return self._days.get(user_id, {}).get(log_date)

    def _store_day(self, user_id: str, day: DailyEntry) -> None:
        with self._registry_lock:
            self._days.setdefault(user_id, {})[day.log_date] = day

    # ==================== Profile Operations ====================

    def set_profile(self, user_id: str, profile: BiometricProfile) -> EnergyEstimate:
        """Recompute a user's estimate from a new profile.

        Days already opened keep their target snapshot.

        Args:
            user_id: The user's ID
            profile: Validated biometric profile

        Returns:
            The new EnergyEstimate
        """
        result = estimate(profile, step=self.config.goal_adjustment_kcal)
        with self._registry_lock:
            self._estimates[user_id] = result
        logger.info("Updated estimate for %s: target %d kcal", user_id, result.target_calories)
        return result

    def current_estimate(self, user_id: str) -> EnergyEstimate | None:
        """Latest estimate for a user, or None if no profile was set."""
        with self._registry_lock:
            return self._estimates.get(user_id)

    def current_target(self, user_id: str) -> int:
        """Target used for newly opened days and empty days in summaries."""
        current = self.current_estimate(user_id)
        if current is None:
            return self.config.default_target_calories
        return current.target_calories

    # ==================== Daily Log Operations ====================

    def get_day(self, user_id: str, log_date: date) -> DailyEntry | None:
        """Fetch a user's day, or None if nothing was logged.

        Stored days are immutable and swapped whole, so reads take no day lock.
        """
        return self._stored_day(user_id, log_date)

    def add_entry(
        self, user_id: str, log_date: date, meal_type: MealType, entry: FoodEntry
    ) -> DailyEntry:
        """Log a food entry, opening the day if needed.

        Args:
            user_id: The user's ID
            log_date: User-local calendar day
            meal_type: Meal to log under
            entry: The food entry to add

        Returns:
            Updated DailyEntry

        Raises:
            InvalidQuantity: If the entry has a non-positive quantity or calories
        """
        with self._lock_for(user_id, log_date):
            day = self._stored_day(user_id, log_date)
            if day is None:
                day = intake.open_day(log_date, self.current_target(user_id))
            updated = intake.add_entry(day, meal_type, entry)
            self._store_day(user_id, updated)

        logger.debug(
            "Added %s to %s on %s for %s (day total %.1f)",
            entry.food_item.name, MealType(meal_type).value, log_date, user_id,
            updated.total_calories,
        )
        return updated

    def remove_entry(
        self, user_id: str, log_date: date, meal_type: MealType, entry_id: str
    ) -> DailyEntry:
        """Remove a food entry from a day.

        Raises:
            EntryNotFound: If the day, meal or entry does not exist
        """
        with self._lock_for(user_id, log_date):
            day = self._stored_day(user_id, log_date)
            if day is None:
                day = intake.open_day(log_date, self.current_target(user_id))
            updated = intake.remove_entry(day, meal_type, entry_id)
            self._store_day(user_id, updated)

        logger.debug("Removed entry %s on %s for %s", entry_id, log_date, user_id)
        return updated

    def replace_entry(
        self,
        user_id: str,
        log_date: date,
        meal_type: MealType,
        entry_id: str,
        entry: FoodEntry,
    ) -> DailyEntry:
        """Replace a logged entry with an edited one.

        Raises:
            InvalidQuantity: If the new entry is invalid
            EntryNotFound: If the day, meal or entry does not exist
        """
        with self._lock_for(user_id, log_date):
            day = self._stored_day(user_id, log_date)
            if day is None:
                day = intake.open_day(log_date, self.current_target(user_id))
            updated = intake.replace_entry(day, meal_type, entry_id, entry)
            self._store_day(user_id, updated)

        logger.debug("Replaced entry %s on %s for %s", entry_id, log_date, user_id)
        return updated

    # ==================== Summaries ====================

    def _days_in(self, user_id: str, window: DateWindow) -> list[DailyEntry]:
        days = []
        for log_date in window.days():
            day = self.get_day(user_id, log_date)
            if day is not None:
                days.append(day)
        return days

    def history(
        self, user_id: str, end: date | None = None, days: int | None = None
    ) -> list[DayBalance]:
        """Balance series for the trailing days ending on `end`.

        Args:
            user_id: The user's ID
            end: Last day of the series (defaults to today)
            days: Number of days (defaults to config.history_days)

        Returns:
            One DayBalance per day, oldest first

        Raises:
            ValueError: If days is less than one
        """
        if end is None:
            end = date.today()
        window = DateWindow.ending(
            end, self.config.history_days if days is None else days
        )
        logger.debug("Summarizing %s from %s to %s", user_id, window.start, window.end)
        return summarize_range(
            self._days_in(user_id, window), window, self.current_target(user_id)
        )

    def report(self, user_id: str, window: DateWindow) -> RangeReport:
        """Aggregate report for an explicit window."""
        return generate_range_report(
            self._days_in(user_id, window), window, self.current_target(user_id)
        )
