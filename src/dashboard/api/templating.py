from pathlib import Path

from fastapi.templating import Jinja2Templates

from ..status import alert_icon, alert_variant, job_status_variant, utilization_level
from ..timeline import axis_offset, format_local
from ..toasts import pop_toasts
from .deps import get_display_timezone

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

NAV_ITEMS = [
    {"title": "Dashboard", "url": "/", "icon": "layout-dashboard"},
    {"title": "Technicians", "url": "/technicians", "icon": "users"},
    {"title": "Job Cards", "url": "/job-cards", "icon": "clipboard-list"},
    {"title": "Schedule", "url": "/schedule", "icon": "calendar"},
    {"title": "Alerts", "url": "/alerts", "icon": "alert-circle"},
    {"title": "KPIs", "url": "/kpis", "icon": "bar-chart-3"},
]


def is_active(item_url: str, path: str) -> bool:
    # The dashboard link only matches the root exactly
    if item_url == "/":
        return path == "/"
    return path == item_url or path.startswith(item_url + "/")


def localtime(value) -> str:
    return format_local(value, get_display_timezone())


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    nav_items=NAV_ITEMS,
    is_active=is_active,
    pop_toasts=pop_toasts,
    axis_offset=axis_offset,
    job_status_variant=job_status_variant,
    alert_variant=alert_variant,
    alert_icon=alert_icon,
    utilization_level=utilization_level,
)
templates.env.filters["localtime"] = localtime
