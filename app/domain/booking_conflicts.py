"""Booking date-range conflict rules.

A candidate range is tested against every existing booking of the same spot
with four rules, in this order:

1. candidate start equals an existing start
2. candidate start falls strictly inside an existing range
3. candidate end equals an existing end
4. candidate end falls strictly inside an existing range

Ranges that touch (candidate end == existing start, candidate start ==
existing end) are admitted, and so is a candidate that strictly contains an
existing booking: neither of its endpoints matches a rule.

Every existing booking is visited and the last rule matched overall is the
one reported.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime

START_DATE = "startDate"
END_DATE = "endDate"

CONFLICT_MESSAGES = {
    START_DATE: "Start date conflicts with an existing booking",
    END_DATE: "End date conflicts with an existing booking",
}


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


@dataclass(frozen=True)
class Conflict:
    """A matched rule: which request field it blames and why."""

    field: str
    message: str
    existing: DateRange


Rule = Callable[[DateRange, DateRange], bool]

CONFLICT_RULES: tuple[tuple[str, Rule], ...] = (
    (START_DATE, lambda new, old: new.start == old.start),
    (START_DATE, lambda new, old: old.start < new.start < old.end),
    (END_DATE, lambda new, old: new.end == old.end),
    (END_DATE, lambda new, old: old.start < new.end < old.end),
)


def as_calendar_date(value: date | datetime) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def to_range(start: date | datetime, end: date | datetime) -> DateRange:
    return DateRange(as_calendar_date(start), as_calendar_date(end))


def matched_conflicts(candidate: DateRange, existing: DateRange) -> list[Conflict]:
    """All rules the candidate trips against one existing booking, in rule order."""
    return [
        Conflict(field=field, message=CONFLICT_MESSAGES[field], existing=existing)
        for field, rule in CONFLICT_RULES
        if rule(candidate, existing)
    ]


def find_conflict(candidate: DateRange, existing: Iterable[DateRange]) -> Conflict | None:
    """Return the last conflict matched across ``existing``, or None to admit.

    ``existing`` is consumed in the order given (store insertion order).
    The caller guarantees ``candidate.end > candidate.start``.
    """
    last: Conflict | None = None
    for booked in existing:
        matches = matched_conflicts(candidate, booked)
        if matches:
            last = matches[-1]
    return last
