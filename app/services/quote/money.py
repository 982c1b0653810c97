"""
Money helpers for published quote ranges.

Ranges are whole euros, snapped to a 50 EUR step, and always at least 500 EUR wide.
"""

ROUNDING_STEP = 50
MIN_RANGE_WIDTH = 500


def round_to_step(amount: int, step: int = ROUNDING_STEP) -> int:
    """
    Round to the nearest multiple of step, halves rounding up, never below zero.

    Integer arithmetic only; 25 -> 50, 75 -> 100 (not round-half-even).

    Args:
        amount: Amount in whole euros
        step: Rounding step

    Returns:
        Non-negative multiple of step
    """
    return max(0, (amount + step // 2) // step * step)


def publishable_range(low: int, high: int) -> tuple[int, int]:
    """
    Snap a raw (low, high) estimate to the published form.

    low is rounded first; high is widened to at least low + MIN_RANGE_WIDTH
    and then rounded, so the width guarantee holds after rounding.

    Returns:
        (low, high) as non-negative multiples of ROUNDING_STEP
    """
    low = round_to_step(low)
    high = round_to_step(max(high, low + MIN_RANGE_WIDTH))
    return low, high
