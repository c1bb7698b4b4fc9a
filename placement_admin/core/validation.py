"""
Field rules shared by the single-entry schemas and the bulk import converter.
"""

import math
import re
from datetime import date
from typing import Optional

from placement_admin.core.departments import NO_BACKLOG

USERNAME_PATTERN = re.compile(r"^[a-z][a-z]*[0-9]*$")

PERCENTAGE_RANGE = (0.0, 100.0)
CGPA_RANGE = (0.0, 10.0)


def parse_numeric(value) -> float:
    """Parse a numeric cell or form string. Raises ValueError on junk."""
    if isinstance(value, bool):
        raise ValueError("not a number")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            raise ValueError("empty value")
        number = float(text)
    if math.isnan(number) or math.isinf(number):
        raise ValueError("not a finite number")
    return number


def check_range(value, low: float, high: float) -> float:
    number = parse_numeric(value)
    if number < low or number > high:
        raise ValueError(f"must be between {low:g} and {high:g}")
    return number


def parse_backlogs(value) -> int:
    """'No Backlog' counts as zero; anything else must be a whole number >= 0."""
    text = str(value).strip()
    if text.lower() == NO_BACKLOG.lower():
        return 0
    number = parse_numeric(text)
    if number < 0 or number != int(number):
        raise ValueError("must be a whole number of backlogs")
    return int(number)


def age_on(born: date, today: Optional[date] = None) -> int:
    """Whole years between born and today."""
    today = today or date.today()
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years
