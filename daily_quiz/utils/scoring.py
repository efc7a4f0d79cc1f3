"""
Percentage helpers with deterministic rounding
"""
from decimal import Decimal, ROUND_HALF_UP


def percentage(part: int, whole: int) -> int:
    """
    Integer percentage of ``part`` over ``whole``
    
    Rounds half away from zero (12.5 -> 13) rather than Python's banker's
    rounding, and returns 0 when ``whole`` is 0.
    """
    if whole <= 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
