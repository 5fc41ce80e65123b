"""Campaign calendar: 30 days split into 3 acts of 10 days.

Every act-window computation in prompts and validators goes through
act_for_day() / act_window(), so changing the campaign length or act count
only touches the constants below.
"""

CAMPAIGN_DAYS = 30
ACT_COUNT = 3
DAYS_PER_ACT = CAMPAIGN_DAYS // ACT_COUNT


def act_for_day(day_number: int) -> int:
    """Return the act a day belongs to (days 1-10 → 1, 11-20 → 2, 21-30 → 3)."""
    if not 1 <= day_number <= CAMPAIGN_DAYS:
        raise ValueError(f"Day {day_number} outside campaign range 1-{CAMPAIGN_DAYS}")
    return (day_number - 1) // DAYS_PER_ACT + 1


def act_window(act_number: int) -> tuple[int, int]:
    """Return the inclusive (first_day, last_day) window of an act."""
    if not 1 <= act_number <= ACT_COUNT:
        raise ValueError(f"Act {act_number} outside range 1-{ACT_COUNT}")
    start = (act_number - 1) * DAYS_PER_ACT + 1
    return start, start + DAYS_PER_ACT - 1
