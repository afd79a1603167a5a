"""Shared fixtures for dashboard tests."""

import pytest


class FakeWorkshopClient:
    """
    Stands in for WorkshopAPIClient.

    Tests configure `responses` (path -> decoded JSON) and `errors`
    (path -> exception to raise). Every call is recorded in `calls`.
    """

    def __init__(self):
        self.responses = {}
        self.errors = {}
        self.calls = []

    async def get(self, path, params=None):
        self.calls.append(("GET", path, params, None))
        if path in self.errors:
            raise self.errors[path]
        return self.responses.get(path)

    async def post(self, path, json=None, params=None):
        self.calls.append(("POST", path, params, json))
        if path in self.errors:
            raise self.errors[path]
        return self.responses.get(path)

    async def aclose(self):
        pass


@pytest.fixture
def fake_api():
    return FakeWorkshopClient()


@pytest.fixture
def schedule_payload():
    """Raw /schedule/board payload: Bob, Alice, Bob in that order."""
    return [
        {
            "technician_name": "Bob",
            "job_id": 101,
            "car_model": "Toyota Corolla",
            "service_type": "Oil Change",
            "task_status": "Completed",
            "scheduled_time": "2024-05-01T07:00:00",
            "promised_delivery": "2024-05-01T09:36:00",
        },
        {
            "technician_name": "Alice",
            "job_id": 102,
            "car_model": "Honda Civic",
            "service_type": "Brake Pads",
            "task_status": "in progress",
            "scheduled_time": "2024-05-01T10:15:00",
            "promised_delivery": "2024-05-01T12:00:00",
        },
        {
            "technician_name": "Bob",
            "job_id": 103,
            "car_model": "Ford Focus",
            "service_type": "Tyre Rotation",
            "task_status": "planned",
            "scheduled_time": "2024-05-01T13:30:00",
            "promised_delivery": "2024-05-01T14:00:00",
        },
    ]

