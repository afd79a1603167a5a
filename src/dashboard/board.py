"""
View model for the schedule board.

ScheduleBoardView owns the board's working data set, its load state, and the
single hover slot. Layout is derived from the working set on every call to
rows(); nothing derived is cached between loads.
"""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from .client import APIError, AuthenticationError
from .models import ScheduleEntry
from .status import StatusStyle, status_label, status_style
from .timeline import BlockLayout, block_position, format_local, hour_axis
from .utils import find_first, group_entries_by_technician, parse_records

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load schedule"


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class BoardBlock:
    entry: ScheduleEntry
    layout: BlockLayout
    style: StatusStyle
    label: str
    hovered: bool = False


@dataclass
class BoardRow:
    technician: str
    blocks: List[BoardBlock]


@dataclass
class DetailPanel:
    job_id: Optional[int]
    status: str
    style: StatusStyle
    service_type: str
    car_model: str
    start: str
    end: str


class HoverState:
    """At most one hovered job id at a time."""

    def __init__(self):
        self.job_id: Optional[int] = None

    def enter(self, job_id: Optional[int]) -> None:
        self.job_id = job_id

    def leave(self, job_id: Optional[int]) -> None:
        # A leave from a block that was already replaced must not clear the newer one
        if job_id == self.job_id:
            self.job_id = None


class ScheduleBoardView:
    """
    Loads and lays out the schedule board.

    Load states: IDLE -> LOADING -> READY | FAILED, and back to LOADING on
    every refresh. Each load gets a token from an increasing sequence; a
    result carrying anything but the latest token is discarded, so a slow
    response from a superseded refresh can never overwrite newer data.

    Args:
        fetch: Coroutine function returning the raw /schedule/board payload.
        notify: Called with a message once per failed load.
        tz: Display timezone for block positions and times. None means the
            server's local zone.
    """

    def __init__(self, fetch: Callable[[], Awaitable[Any]],
                 notify: Callable[[str], None], tz: Optional[tzinfo] = None):
        self._fetch = fetch
        self._notify = notify
        self.tz = tz
        self.state = LoadState.IDLE
        self.entries: List[ScheduleEntry] = []
        self.hover = HoverState()
        self._sequence = 0

    # --- Load state machine ---

    def begin_load(self) -> int:
        self._sequence += 1
        self.state = LoadState.LOADING
        return self._sequence

    def is_current(self, token: int) -> bool:
        return token == self._sequence

    def complete(self, token: int, payload: Any) -> bool:
        """Replaces the working set with a successful payload. Returns False if the token is stale."""
        if not self.is_current(token):
            logger.warning(f"Discarding stale schedule response (token {token}, latest {self._sequence})")
            return False
        self.entries = parse_records(payload, ScheduleEntry)
        self.state = LoadState.READY
        return True

    def fail(self, token: int, error: Exception) -> bool:
        """Clears the working set after a failed load. Returns False if the token is stale."""
        if not self.is_current(token):
            logger.warning(f"Discarding stale schedule failure (token {token}, latest {self._sequence}): {error}")
            return False
        logger.error(f"Error fetching schedule board: {error}")
        self.entries = []
        self.state = LoadState.FAILED
        self._notify(LOAD_FAILED_MESSAGE)
        return True

    async def refresh(self) -> None:
        token = self.begin_load()
        try:
            payload = await self._fetch()
        except AuthenticationError as e:
            self.fail(token, e)
            raise
        except APIError as e:
            self.fail(token, e)
            return
        self.complete(token, payload)

    @property
    def loading(self) -> bool:
        return self.state is LoadState.LOADING

    @property
    def empty(self) -> bool:
        return not self.loading and not self.entries

    # --- Layout ---

    def axis(self) -> List[str]:
        return hour_axis()

    def rows(self) -> List[BoardRow]:
        rows = []
        for technician, entries in group_entries_by_technician(self.entries).items():
            blocks = [
                BoardBlock(
                    entry=entry,
                    layout=block_position(entry.scheduled_time, entry.promised_delivery, self.tz),
                    style=status_style(entry.task_status),
                    label=status_label(entry.task_status),
                    hovered=entry.job_id is not None and entry.job_id == self.hover.job_id,
                )
                for entry in entries
            ]
            rows.append(BoardRow(technician=technician, blocks=blocks))
        return rows

    # --- Hover ---

    def hover_enter(self, job_id: Optional[int]) -> None:
        self.hover.enter(job_id)

    def hover_leave(self, job_id: Optional[int]) -> None:
        self.hover.leave(job_id)

    def detail_panel(self) -> Optional[DetailPanel]:
        """The detail panel for the hovered block, or None."""
        if self.hover.job_id is None:
            return None
        entry = find_first(self.entries, lambda e: e.job_id == self.hover.job_id)
        if entry is None:
            return None
        return self.build_panel(entry)

    def build_panel(self, entry: ScheduleEntry) -> DetailPanel:
        return DetailPanel(
            job_id=entry.job_id,
            status=status_label(entry.task_status),
            style=status_style(entry.task_status),
            service_type=entry.service_type or "n/a",
            car_model=entry.car_model or "n/a",
            start=format_local(entry.scheduled_time, self.tz),
            end=format_local(entry.promised_delivery, self.tz),
        )
