"""
Geometry for the schedule board.

Jobs are placed on a fixed daily window (07:00-20:00). Positions are
percentages of a technician row's width. All hour arithmetic happens on the
viewer's local wall clock: timezone-aware timestamps are converted to the
display zone first, naive timestamps are taken as already local.
"""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import List, Optional

WINDOW_START_HOUR = 7
WINDOW_END_HOUR = 20
WINDOW_SPAN_HOURS = WINDOW_END_HOUR - WINDOW_START_HOUR  # 13
MIN_BLOCK_WIDTH = 5.0


@dataclass(frozen=True)
class BlockLayout:
    """Horizontal placement of a block, in percent of the row width."""
    left: float
    width: float


def hour_axis() -> List[str]:
    """Hour labels from 07:00 to 20:00 inclusive."""
    return [f"{hour:02d}:00" for hour in range(WINDOW_START_HOUR, WINDOW_END_HOUR + 1)]


def axis_offset(index: int) -> float:
    """Percentage offset of the index-th hour label on the same scale as blocks."""
    return (index / WINDOW_SPAN_HOURS) * 100


def to_local(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Converts a timestamp to the viewer's local time.

    Args:
        dt: The timestamp to convert.
        tz: Display timezone. None means the server's local zone.

    Returns:
        The timestamp in local time. Naive timestamps are returned unchanged.
    """
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt
    if tz is None:
        return dt.astimezone()
    return dt.astimezone(tz)


def hour_of_day(dt: datetime, tz: Optional[tzinfo] = None) -> float:
    """Local hour as a real number, e.g. 09:30 -> 9.5. Seconds are ignored."""
    local = to_local(dt, tz)
    return local.hour + local.minute / 60


def block_position(start: Optional[datetime], end: Optional[datetime],
                   tz: Optional[tzinfo] = None) -> BlockLayout:
    """
    Computes the left offset and width of a job block.

    left  = ((startHour - 7) / 13) * 100, never below 0
    width = ((endHour - startHour) / 13) * 100, never below MIN_BLOCK_WIDTH

    Blocks running past 20:00 are not clipped here; the row truncates them.
    A missing start pins the block to the window start, a missing end gives
    it the minimum width.
    """
    start_hour = hour_of_day(start, tz) if start is not None else float(WINDOW_START_HOUR)
    end_hour = hour_of_day(end, tz) if end is not None else start_hour

    left = ((start_hour - WINDOW_START_HOUR) / WINDOW_SPAN_HOURS) * 100
    width = ((end_hour - start_hour) / WINDOW_SPAN_HOURS) * 100

    return BlockLayout(left=max(0.0, left), width=max(MIN_BLOCK_WIDTH, width))


def format_local(dt: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    if dt is None:
        return "n/a"
    return to_local(dt, tz).strftime("%Y-%m-%d %H:%M")
