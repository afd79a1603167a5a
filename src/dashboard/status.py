"""Lookups from backend status strings to display styles.

Every lookup here is total: unknown, empty or missing values fall to a
defined default instead of raising.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TaskStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in progress"
    PLANNED = "planned"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "TaskStatus":
        if not value:
            return cls.OTHER
        normalized = str(value).strip().lower()
        for member in (cls.COMPLETED, cls.IN_PROGRESS, cls.PLANNED):
            if member.value == normalized:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class StatusStyle:
    fill: str
    badge_bg: str
    badge_text: str
    badge_border: str


STATUS_STYLES = {
    TaskStatus.COMPLETED: StatusStyle(
        fill="#22c55e", badge_bg="#dcfce7", badge_text="#166534", badge_border="#86efac"
    ),
    TaskStatus.IN_PROGRESS: StatusStyle(
        fill="#eab308", badge_bg="#fef9c3", badge_text="#854d0e", badge_border="#fde047"
    ),
    TaskStatus.PLANNED: StatusStyle(
        fill="#3b82f6", badge_bg="#dbeafe", badge_text="#1e40af", badge_border="#93c5fd"
    ),
    TaskStatus.OTHER: StatusStyle(
        fill="#9ca3af", badge_bg="#f3f4f6", badge_text="#374151", badge_border="#d1d5db"
    ),
}


def status_style(value: Optional[str]) -> StatusStyle:
    return STATUS_STYLES[TaskStatus.from_raw(value)]


def status_label(value: Optional[str]) -> str:
    """The status as sent by the backend, or 'Pending' when it is blank."""
    if value is None or not str(value).strip():
        return "Pending"
    return str(value)


# --- Job cards, alerts, technicians ---

def job_status_variant(status: Optional[str]) -> str:
    task_status = TaskStatus.from_raw(status)
    if task_status is TaskStatus.COMPLETED:
        return "default"
    if task_status is TaskStatus.IN_PROGRESS:
        return "secondary"
    return "outline"


def is_critical(severity: Optional[str]) -> bool:
    return bool(severity) and str(severity).strip().lower() == "critical"


def alert_variant(severity: Optional[str]) -> str:
    return "destructive" if is_critical(severity) else "default"


def alert_icon(severity: Optional[str]) -> str:
    return "alert-circle" if is_critical(severity) else "info"


def utilization_level(utilization: float) -> str:
    # Thresholds: under 50% is comfortable, 80% and up is overloaded
    if utilization < 50:
        return "success"
    if utilization < 80:
        return "warning"
    return "destructive"
