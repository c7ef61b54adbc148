# tutoring_calendar/services/slots/config.py
"""
Slot generation rules.
"""

from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class SlotRules:
    """
    Hour bands used to build a week of availability.

    Attributes:
        weekday_hours: [start, end) hours offered Monday-Friday
        weekend_hours: [start, end) hours offered Saturday-Sunday
        grid_first_hour: first row of the week/day grid
        grid_last_hour: last row of the week/day grid (inclusive)
    """
    weekday_hours: tuple[int, int] = (14, 22)
    weekend_hours: tuple[int, int] = (9, 14)
    grid_first_hour: int = 8
    grid_last_hour: int = 22

    def __post_init__(self):
        """Validate configuration."""
        for name in ("weekday_hours", "weekend_hours"):
            start, end = getattr(self, name)
            if not 0 <= start < end <= 24:
                raise ValueError(f"{name} must satisfy 0 <= start < end <= 24, got {start}-{end}")
        if self.grid_first_hour > self.grid_last_hour:
            raise ValueError("grid_first_hour must not exceed grid_last_hour")

    @property
    def grid_hours(self) -> list[int]:
        """
        Rows shown by the week and day views.

        08:00 → 22:00 inclusive = 15 rows.
        """
        return list(range(self.grid_first_hour, self.grid_last_hour + 1))

    def hours_for(self, is_weekend: bool) -> range:
        start, end = self.weekend_hours if is_weekend else self.weekday_hours
        return range(start, end)

    def is_open_hour(self, hour: int, is_weekend: bool) -> bool:
        """True when the weekday band covers this hour (weekends never count)."""
        if is_weekend:
            return False
        start, end = self.weekday_hours
        return start <= hour < end

    def format_hour(self, hour: int) -> str:
        return f"{hour:02d}:00"


@lru_cache
def get_slot_rules() -> SlotRules:
    """Get slot rules (singleton)."""
    return SlotRules()
