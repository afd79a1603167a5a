from datetime import datetime
from typing import Optional, Any

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parses an ISO 8601 timestamp leniently.

    A trailing 'Z' is treated as UTC. Values that cannot be parsed come back
    as None so a single bad field never rejects the whole record.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    iso_str = value.strip()
    if iso_str.endswith('Z'):
        iso_str = iso_str[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(iso_str)
    except ValueError:
        return None


# --- Schedule board ---

class ScheduleEntry(BaseModel):
    """One technician/job assignment on the schedule board."""
    model_config = ConfigDict(populate_by_name=True)

    technician_name: str = "Unassigned"
    job_id: Optional[int] = None
    car_model: Optional[str] = None
    service_type: Optional[str] = None
    task_status: Optional[str] = Field(
        None, validation_alias=AliasChoices("task_status", "status")
    )
    scheduled_time: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("scheduled_time", "start_time")
    )
    promised_delivery: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("promised_delivery", "end_time")
    )

    @field_validator("technician_name", mode="before")
    @classmethod
    def default_technician(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "Unassigned"
        return str(v)

    @field_validator("job_id", mode="before")
    @classmethod
    def lenient_job_id(cls, v):
        try:
            return int(v) if v is not None else None
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("car_model", "service_type", "task_status", mode="before")
    @classmethod
    def lenient_text(cls, v):
        return None if v is None else str(v)

    @field_validator("scheduled_time", "promised_delivery", mode="before")
    @classmethod
    def lenient_timestamp(cls, v):
        return parse_timestamp(v)


# --- Sibling pages ---

class Technician(BaseModel):
    technician_id: int
    name: str
    skill_level: str = ""
    utilization: float = 0.0
    available: bool = False


class JobCard(BaseModel):
    job_id: int
    customer_name: str = ""
    service_type: str = ""
    promised_delivery_time: Optional[datetime] = None
    status: str = ""
    technician_id: Optional[int] = None

    @field_validator("promised_delivery_time", mode="before")
    @classmethod
    def lenient_timestamp(cls, v):
        return parse_timestamp(v)

    @property
    def can_auto_assign(self) -> bool:
        """Only unassigned jobs still pending can be auto-assigned."""
        return self.technician_id is None and self.status.strip().lower() == "pending"


class JobCardCreate(BaseModel):
    """Payload for POST /jobcards, as submitted by the create form."""
    customer_name: str = Field(..., min_length=1)
    service_type: str = Field(..., min_length=1)
    promised_delivery_time: datetime

    @field_validator("customer_name", "service_type", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class AlertItem(BaseModel):
    alert_id: int
    alert_type: str = ""
    message: str = ""
    severity: str = ""
    created_at: Optional[datetime] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, v):
        return parse_timestamp(v)


class KPIOverview(BaseModel):
    total_jobs: int = 0
    pending_jobs: int = 0
    completed_jobs: int = 0
    average_utilization: float = 0.0
    on_time_completion_rate: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def none_is_zero(cls, v):
        return 0 if v is None else v


class TrendPoint(BaseModel):
    date: str
    total_jobs: int = 0
    completed_jobs: int = 0


class TechnicianPerformance(BaseModel):
    technician_name: str
    jobs_completed: int = 0
    average_time: float = 0.0


class SessionUser(BaseModel):
    username: str
    email: Optional[str] = None
