"""Tests for grouping and record parsing helpers."""

import pytest

from pydantic import BaseModel, field_validator

from src.dashboard.models import ScheduleEntry, Technician
from src.dashboard.utils import ensure_list, group_entries_by_technician, parse_records


def entry(technician, job_id):
    return ScheduleEntry(technician_name=technician, job_id=job_id)


def test_grouping_preserves_first_seen_technician_order():
    entries = [entry("Bob", 1), entry("Alice", 2), entry("Bob", 3)]

    grouped = group_entries_by_technician(entries)

    assert list(grouped.keys()) == ["Bob", "Alice"]
    assert [e.job_id for e in grouped["Bob"]] == [1, 3]
    assert [e.job_id for e in grouped["Alice"]] == [2]


def test_grouping_is_a_partition():
    entries = [entry(name, i) for i, name in enumerate(["C", "A", "B", "A", "C", "C"])]

    grouped = group_entries_by_technician(entries)

    flattened = [e for group in grouped.values() for e in group]
    assert len(flattened) == len(entries)
    assert {e.job_id for e in flattened} == {e.job_id for e in entries}


def test_grouping_does_not_sort_by_time():
    late = ScheduleEntry(technician_name="Bob", job_id=1, scheduled_time="2024-05-01T15:00:00")
    early = ScheduleEntry(technician_name="Bob", job_id=2, scheduled_time="2024-05-01T08:00:00")

    grouped = group_entries_by_technician([late, early])

    assert [e.job_id for e in grouped["Bob"]] == [1, 2]


def test_grouping_empty():
    assert group_entries_by_technician([]) == {}


@pytest.mark.parametrize("payload", [{}, None, "oops", 42])
def test_ensure_list_rejects_non_lists(payload):
    assert ensure_list(payload) == []


def test_parse_records_skips_invalid_items():
    payload = [
        {"technician_id": 1, "name": "Alice", "utilization": 42.5, "available": True},
        "not a record",
        {"name": "Missing id"},
        {"technician_id": 2, "name": "Bob"},
    ]

    technicians = parse_records(payload, Technician)

    assert [t.name for t in technicians] == ["Alice", "Bob"]
    assert technicians[1].utilization == 0.0


class Gauge(BaseModel):
    reading: int

    @field_validator("reading", mode="before")
    @classmethod
    def checked_reading(cls, v):
        if v == "overflow":
            raise OverflowError("reading out of range")
        return v


def test_parse_records_skips_items_that_raise_unexpected_errors():
    records = parse_records([{"reading": "overflow"}, {"reading": 4}], Gauge)

    assert [r.reading for r in records] == [4]
