# cma_engine/services/formatting.py
"""
Display conventions for CMA tables.

Money is shown in lakhs with two decimals. NaN or infinite amounts collapse to
"0.00" so a report always renders; a ratio with a zero denominator shows "N/A".
"""

from typing import Optional

import numpy as np

from cma_engine.config.settings import settings

NOT_AVAILABLE = "N/A"


def _two_decimals(value: float) -> str:
    # Adding 0.0 turns a rounded -0.0 into 0.0
    return f"{round(value, 2) + 0.0:.2f}"


def format_lakhs(value: Optional[float], lakh: float = settings.LAKH) -> str:
    """INR amount -> '660.00' (lakhs)"""
    if value is None or not np.isfinite(value):
        return "0.00"
    return _two_decimals(value / lakh)


def format_ratio(value: Optional[float]) -> str:
    """None marks a zero denominator"""
    if value is None:
        return NOT_AVAILABLE
    if not np.isfinite(value):
        return "0.00"
    return _two_decimals(value)


def safe_divide(numerator: float, denominator: float) -> Optional[float]:
    if denominator == 0:
        return None
    return numerator / denominator
