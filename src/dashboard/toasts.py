"""One-shot notifications kept in the session until the next rendered page."""

from typing import Dict, List

from starlette.requests import Request

SESSION_KEY = "toasts"


def push_toast(request: Request, level: str, message: str) -> None:
    toasts = list(request.session.get(SESSION_KEY, []))
    toasts.append({"level": level, "message": message})
    request.session[SESSION_KEY] = toasts


def pop_toasts(request: Request) -> List[Dict[str, str]]:
    return request.session.pop(SESSION_KEY, [])
