from datetime import date
from typing import Optional


def calculate_age(birth_date: Optional[date], today: Optional[date] = None) -> int:
    """Whole years since ``birth_date``; 0 when there is no birth date."""
    if birth_date is None:
        return 0
    if today is None:
        today = date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
