import asyncio
import logging
from datetime import tzinfo
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from fastapi import APIRouter, Depends, Form, Path, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from .. import data_interface
from ..board import LOAD_FAILED_MESSAGE, LoadState, ScheduleBoardView
from ..charts import average_time_figure, performance_figure, to_fragment, trend_figure
from ..client import APIError, AuthenticationError, WorkshopAPIClient
from ..models import JobCardCreate, KPIOverview
from ..toasts import push_toast
from .deps import TOKEN_KEY, USER_KEY, get_api_client, get_display_timezone, require_user
from .templating import templates

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")


async def load_or_default(request: Request, fetch: Awaitable[T], message: str, default: T) -> T:
    """
    Awaits a fetch at the page's fetch boundary.

    On an API failure the error is logged, one error toast is queued and the
    default is returned so the page renders an explicit empty state. Auth
    failures propagate to the app-level handler.
    """
    try:
        return await fetch
    except AuthenticationError:
        raise
    except APIError as e:
        logger.error(f"{message}: {str(e)}")
        push_toast(request, "error", message)
        return default


def redirect_to(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


# --- Auth ---

@router.get("/login", response_class=HTMLResponse, tags=["auth"])
async def login_page(request: Request):
    if request.session.get(TOKEN_KEY):
        return redirect_to("/")
    return templates.TemplateResponse(request, "login.html", {"username": ""})


@router.post("/login", tags=["auth"])
async def login_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    """
    Sign in against the workshop API and keep the token in the session.
    """
    try:
        token, user = await data_interface.login(client, username, password)
    except AuthenticationError:
        push_toast(request, "error", "Invalid username or password")
        return templates.TemplateResponse(
            request, "login.html", {"username": username}, status_code=401
        )
    except APIError as e:
        logger.error(f"Error signing in: {str(e)}")
        push_toast(request, "error", "Could not reach the workshop server")
        return templates.TemplateResponse(
            request, "login.html", {"username": username}, status_code=503
        )

    request.session[TOKEN_KEY] = token
    request.session[USER_KEY] = user.model_dump()
    logger.info(f"User {user.username!r} signed in")
    return redirect_to("/")


@router.post("/logout", tags=["auth"])
async def logout(request: Request):
    request.session.clear()
    return redirect_to("/login")


# --- Dashboard ---

@router.get("/", response_class=HTMLResponse, tags=["pages"])
async def dashboard(
    request: Request,
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    """
    Headline KPI cards.
    """
    kpis = await load_or_default(
        request, data_interface.fetch_kpi_overview(client), "Failed to load KPI data", KPIOverview()
    )
    cards = [
        {"title": "Total Jobs", "value": kpis.total_jobs, "icon": "clipboard-list", "tone": "primary"},
        {"title": "Pending Jobs", "value": kpis.pending_jobs, "icon": "clock", "tone": "warning"},
        {"title": "Completed Jobs", "value": kpis.completed_jobs, "icon": "check-circle", "tone": "success"},
        {"title": "Avg Utilization", "value": f"{kpis.average_utilization:.1f}%", "icon": "trending-up", "tone": "chart-4"},
        {"title": "On-Time Rate", "value": f"{kpis.on_time_completion_rate:.1f}%", "icon": "target", "tone": "chart-5"},
    ]
    return templates.TemplateResponse(request, "dashboard.html", {"user": user, "cards": cards})


# --- Technicians ---

@router.get("/technicians", response_class=HTMLResponse, tags=["pages"])
async def technicians_page(
    request: Request,
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    technicians = await load_or_default(
        request, data_interface.fetch_technicians(client), "Failed to load technicians", []
    )
    return templates.TemplateResponse(
        request, "technicians.html", {"user": user, "technicians": technicians}
    )


# --- Job cards ---

@router.get("/job-cards", response_class=HTMLResponse, tags=["pages"])
async def job_cards_page(
    request: Request,
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    jobs = await load_or_default(
        request, data_interface.fetch_job_cards(client), "Failed to load job cards", []
    )
    return templates.TemplateResponse(request, "job_cards.html", {"user": user, "jobs": jobs})


@router.post("/job-cards", tags=["pages"])
async def create_job_card(
    request: Request,
    customer_name: str = Form(...),
    service_type: str = Form(...),
    promised_delivery_time: str = Form(...),
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    """
    Create a job card from the dialog form, then return to the list.
    """
    try:
        job_card = JobCardCreate(
            customer_name=customer_name,
            service_type=service_type,
            promised_delivery_time=promised_delivery_time,
        )
    except ValidationError as e:
        logger.warning(f"Rejected job card form: {e.error_count()} error(s)")
        push_toast(request, "error", "Please fill in all required fields.")
        return redirect_to("/job-cards")

    try:
        await data_interface.create_job_card(client, job_card)
    except AuthenticationError:
        raise
    except APIError as e:
        logger.error(f"Error creating job card: {str(e)}")
        push_toast(request, "error", "Failed to create job card")
    else:
        push_toast(request, "success", "Job card created successfully")
    return redirect_to("/job-cards")


@router.post("/job-cards/{job_id}/auto-assign", tags=["pages"])
async def auto_assign(
    request: Request,
    job_id: int = Path(..., description="The ID of the job to auto-assign"),
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    try:
        await data_interface.auto_assign_job(client, job_id)
    except AuthenticationError:
        raise
    except APIError as e:
        logger.error(f"Error auto-assigning job {job_id}: {str(e)}")
        push_toast(request, "error", "Failed to auto-assign job")
    else:
        push_toast(request, "success", "Job auto-assigned successfully")
    return redirect_to("/job-cards")


# --- Schedule board ---

def parse_hover(hover: Optional[str]) -> Optional[int]:
    """A hover value that is not a job id opens no panel."""
    if not hover:
        return None
    try:
        return int(hover)
    except ValueError:
        return None


async def load_board(client: WorkshopAPIClient, tz: Optional[tzinfo],
                     hover: Optional[int], notify: Callable[[str], None]) -> ScheduleBoardView:
    view = ScheduleBoardView(
        fetch=lambda: data_interface.fetch_schedule_board(client),
        notify=notify,
        tz=tz,
    )
    await view.refresh()
    if hover is not None:
        view.hover_enter(hover)
    return view


def serialize_board(view: ScheduleBoardView, errors: List[str]) -> Dict[str, Any]:
    detail = view.detail_panel()
    return {
        "state": view.state.value,
        "errors": errors,
        "axis": view.axis(),
        "rows": [
            {
                "technician": row.technician,
                "blocks": [
                    {
                        "job_id": block.entry.job_id,
                        "left": block.layout.left,
                        "width": block.layout.width,
                        "status": block.label,
                        "fill": block.style.fill,
                        "hovered": block.hovered,
                    }
                    for block in row.blocks
                ],
            }
            for row in view.rows()
        ],
        "detail": None if detail is None else {
            "job_id": detail.job_id,
            "status": detail.status,
            "service_type": detail.service_type,
            "car_model": detail.car_model,
            "start": detail.start,
            "end": detail.end,
        },
    }


@router.get("/schedule", response_class=HTMLResponse, tags=["schedule"])
async def schedule_page(
    request: Request,
    user: dict = Depends(require_user),
):
    """
    Schedule board shell. It renders in the loading state; the page script
    then requests /schedule/board and swaps the result in.
    """
    return templates.TemplateResponse(
        request,
        "schedule.html",
        {"user": user, "state": LoadState.LOADING, "failed_message": LOAD_FAILED_MESSAGE},
    )


@router.get("/schedule/board", response_class=HTMLResponse, tags=["schedule"])
async def schedule_board_fragment(
    request: Request,
    hover: Optional[str] = Query(None, description="Job ID whose detail panel is open"),
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
    tz: Optional[tzinfo] = Depends(get_display_timezone),
):
    """
    The board itself: one row per technician, jobs positioned on the
    07:00-20:00 axis. Load failures come back as toasts inside the fragment.
    """
    errors: List[str] = []
    view = await load_board(client, tz, parse_hover(hover), errors.append)
    return templates.TemplateResponse(
        request,
        "_board.html",
        {
            "view": view,
            "axis": view.axis(),
            "rows": view.rows(),
            "detail": view.detail_panel(),
            "errors": errors,
        },
    )


@router.get("/schedule/board.json", tags=["schedule"])
async def schedule_board_json(
    request: Request,
    hover: Optional[str] = Query(None, description="Job ID whose detail panel is open"),
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
    tz: Optional[tzinfo] = Depends(get_display_timezone),
):
    errors: List[str] = []
    view = await load_board(client, tz, parse_hover(hover), errors.append)
    return serialize_board(view, errors)


# --- Alerts ---

@router.get("/alerts", response_class=HTMLResponse, tags=["pages"])
async def alerts_page(
    request: Request,
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    alerts = await load_or_default(
        request, data_interface.fetch_alerts(client), "Failed to load alerts", []
    )
    return templates.TemplateResponse(request, "alerts.html", {"user": user, "alerts": alerts})


# --- KPIs ---

@router.get("/kpis", response_class=HTMLResponse, tags=["pages"])
async def kpis_page(
    request: Request,
    user: dict = Depends(require_user),
    client: WorkshopAPIClient = Depends(get_api_client),
):
    """
    KPI charts. Trends and technician performance are fetched together; if
    either read fails, both charts render empty.
    """
    results = await asyncio.gather(
        data_interface.fetch_kpi_trends(client),
        data_interface.fetch_technician_performance(client),
        return_exceptions=True,
    )
    errors = [r for r in results if isinstance(r, BaseException)]
    for error in errors:
        if isinstance(error, AuthenticationError) or not isinstance(error, APIError):
            raise error

    if errors:
        logger.error(f"Error fetching KPI data: {str(errors[0])}")
        push_toast(request, "error", "Failed to load KPI data")
        trends, performance = [], []
    else:
        trends, performance = results

    charts = {
        "trends": to_fragment(trend_figure(trends)),
        "performance": to_fragment(performance_figure(performance)),
        "average_time": to_fragment(average_time_figure(performance)),
    }
    return templates.TemplateResponse(request, "kpis.html", {"user": user, "charts": charts})
