"""Energy densities and the rounding rule shared by every figure."""

from decimal import Decimal, ROUND_HALF_UP


KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's round() is banker's rounding, so 0.5 steps go through Decimal
    using the shortest repr of the float.
    """
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
