import logging
from typing import Any, List, Tuple

from .client import AuthenticationError, WorkshopAPIClient
from .models import (
    AlertItem, JobCard, JobCardCreate, KPIOverview, SessionUser, Technician,
    TechnicianPerformance, TrendPoint,
)
from .utils import ensure_list, parse_records

logger = logging.getLogger(__name__)

# Every function takes the API client first so routes and tests can swap it.


async def login(client: WorkshopAPIClient, username: str, password: str) -> Tuple[str, SessionUser]:
    """
    Exchanges credentials for a bearer token.

    Returns:
        (token, user). When the backend omits the user record, the username
        that was submitted is used.

    Raises:
        AuthenticationError: If the credentials are rejected or no token
            comes back.
    """
    result = await client.post("/auth/login", json={"username": username, "password": password})
    if not isinstance(result, dict) or not result.get("access_token"):
        raise AuthenticationError("Login response did not contain an access token")

    user_data = result.get("user")
    if isinstance(user_data, dict) and user_data.get("username"):
        user = SessionUser(username=user_data["username"], email=user_data.get("email"))
    else:
        user = SessionUser(username=username)
    return result["access_token"], user


async def fetch_schedule_board(client: WorkshopAPIClient) -> List[Any]:
    """Fetches the raw schedule board entries. A non-list payload is treated as empty."""
    payload = await client.get("/schedule/board")
    if not isinstance(payload, list):
        logger.warning(f"Schedule board payload is {type(payload).__name__}, not a list; treating as empty")
    return ensure_list(payload)


async def fetch_technicians(client: WorkshopAPIClient) -> List[Technician]:
    return parse_records(await client.get("/technicians"), Technician)


async def fetch_job_cards(client: WorkshopAPIClient) -> List[JobCard]:
    return parse_records(await client.get("/jobcards"), JobCard)


async def create_job_card(client: WorkshopAPIClient, job_card: JobCardCreate) -> Any:
    """Creates a job card. The delivery time is sent as ISO 8601 with seconds, e.g. 2024-05-01T10:00:00."""
    payload = job_card.model_dump(mode="json")
    result = await client.post("/jobcards", json=payload)
    logger.info(f"Created job card for {job_card.customer_name!r}")
    return result


async def auto_assign_job(client: WorkshopAPIClient, job_id: int) -> Any:
    result = await client.post("/jobcards/auto_assign", params={"job_id": job_id})
    logger.info(f"Auto-assigned job {job_id}")
    return result


async def fetch_alerts(client: WorkshopAPIClient) -> List[AlertItem]:
    return parse_records(await client.get("/alerts"), AlertItem)


async def fetch_kpi_overview(client: WorkshopAPIClient) -> KPIOverview:
    """Fetches the headline KPIs. A missing or malformed payload yields zeros."""
    payload = await client.get("/kpi/overview")
    if not isinstance(payload, dict):
        return KPIOverview()
    try:
        return KPIOverview.model_validate(payload)
    except ValueError as e:
        logger.warning(f"Malformed KPI overview payload: {e}")
        return KPIOverview()


async def fetch_kpi_trends(client: WorkshopAPIClient) -> List[TrendPoint]:
    return parse_records(await client.get("/kpi/trends"), TrendPoint)


async def fetch_technician_performance(client: WorkshopAPIClient) -> List[TechnicianPerformance]:
    return parse_records(await client.get("/kpi/technician_performance"), TechnicianPerformance)
