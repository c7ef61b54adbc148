# tutoring_calendar/utils/pl_dates.py
"""
Polish date labels for calendar headers.
"""

from datetime import date, datetime

WEEKDAYS_LONG = [
    "poniedziałek", "wtorek", "środa", "czwartek", "piątek", "sobota", "niedziela",
]
WEEKDAYS_SHORT = ["pon.", "wt.", "śr.", "czw.", "pt.", "sob.", "niedz."]

# Genitive forms, as used after a day number
MONTHS_GENITIVE = [
    "stycznia", "lutego", "marca", "kwietnia", "maja", "czerwca",
    "lipca", "sierpnia", "września", "października", "listopada", "grudnia",
]
MONTHS_SHORT = [
    "sty", "lut", "mar", "kwi", "maj", "cze",
    "lip", "sie", "wrz", "paź", "lis", "gru",
]


def weekday_short(d: date) -> str:
    return WEEKDAYS_SHORT[d.weekday()]


def month_short(d: date) -> str:
    return MONTHS_SHORT[d.month - 1]


def full_date(d: date, with_year: bool = True) -> str:
    """Long date, e.g. wtorek, 4 czerwca 2024 (year optional)."""
    label = f"{WEEKDAYS_LONG[d.weekday()]}, {d.day} {MONTHS_GENITIVE[d.month - 1]}"
    if with_year:
        label += f" {d.year}"
    return label


def week_range(start: date, end: date) -> str:
    """Week header, e.g. 3 cze - 9 cze 2024."""
    return f"{start.day} {month_short(start)} - {end.day} {month_short(end)} {end.year}"


def time_range(start: datetime, end: datetime) -> str:
    return f"{start:%H:%M} - {end:%H:%M}"
