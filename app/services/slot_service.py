from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class TimeWindow:
    """A [start, end) span of wall-clock time, both ends as HH:MM."""

    start: str
    end: str


@dataclass(frozen=True)
class Slot:
    start_time: str
    end_time: str
    key: str


def parse_time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(value: int) -> str:
    return f"{value // 60:02d}:{value % 60:02d}"


def create_slot_key(date_iso: str, start_time: str) -> str:
    return f"{date_iso}_{start_time}"


def _overlaps(slot_start: int, slot_end: int, break_start: int, break_end: int) -> bool:
    # Touching endpoints do not count as overlap
    return slot_start < break_end and slot_end > break_start


def generate_slots(
    date_iso: str,
    work_hours: TimeWindow,
    breaks: Iterable[TimeWindow] = (),
    slot_minutes: int = 30,
) -> list[Slot]:
    """Generate the bookable slots for one date, earliest first.

    Slots are laid out back to back from the start of working hours. A slot that
    would run past the end of working hours is dropped rather than truncated, and
    a slot that intersects any break is skipped. Breaks are checked one by one, so
    they may be unsorted or overlap each other.
    """
    if slot_minutes <= 0:
        return []
    work_start = parse_time_to_minutes(work_hours.start)
    work_end = parse_time_to_minutes(work_hours.end)
    windows = [(parse_time_to_minutes(b.start), parse_time_to_minutes(b.end)) for b in breaks]

    slots: list[Slot] = []
    start = work_start
    while start + slot_minutes <= work_end:
        end = start + slot_minutes
        if not any(_overlaps(start, end, b_start, b_end) for b_start, b_end in windows):
            start_time = format_minutes(start)
            slots.append(
                Slot(
                    start_time=start_time,
                    end_time=format_minutes(end),
                    key=create_slot_key(date_iso, start_time),
                )
            )
        start = end
    return slots


def find_slot(slots: Iterable[Slot], start_time: str) -> Slot | None:
    for slot in slots:
        if slot.start_time == start_time:
            return slot
    return None
