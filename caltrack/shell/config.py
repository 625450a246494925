"""Runtime configuration, read from the environment."""

import os
from dataclasses import dataclass

from ..core.energy import GOAL_ADJUSTMENT_KCAL


@dataclass
class AggregatorConfig:
    """Configuration for IntakeAggregator.

    Attributes:
        history_days: Days covered by history() when no count is given
        default_target_calories: Target for users without a profile
        goal_adjustment_kcal: Daily surplus/deficit for lose/gain goals
    """

    history_days: int = 7
    default_target_calories: int = 2000
    goal_adjustment_kcal: int = GOAL_ADJUSTMENT_KCAL

    @classmethod
    def from_env(cls) -> "AggregatorConfig":
        """Build a config, falling back to defaults for unset variables."""
        return cls(
            history_days=int(os.environ.get("CALTRACK_HISTORY_DAYS", cls.history_days)),
            default_target_calories=int(
                os.environ.get("CALTRACK_DEFAULT_TARGET", cls.default_target_calories)
            ),
            goal_adjustment_kcal=int(
                os.environ.get("CALTRACK_GOAL_STEP", cls.goal_adjustment_kcal)
            ),
        )
