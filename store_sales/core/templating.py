from fastapi import Request

from store_sales.config import get_settings
from store_sales.core.auth import auth_context

_FLASH_KEY = "flash"


def flash(request: Request, message: str) -> None:
    messages = list(request.session.get(_FLASH_KEY, []))
    messages.append(message)
    request.session[_FLASH_KEY] = messages


def pop_flashes(request: Request) -> list[str]:
    return list(request.session.pop(_FLASH_KEY, []))


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    templates = request.app.state.templates
    payload = {
        "auth": auth_context(request),
        "currency": get_settings().CURRENCY_SYMBOL,
        "flashes": pop_flashes(request),
    }
    payload.update(context or {})
    return templates.TemplateResponse(request, name, payload, status_code=status_code)


def render_not_found(request: Request, message: str, back_url: str, back_label: str):
    return render(
        request,
        "not_found.html",
        {"message": message, "back_url": back_url, "back_label": back_label},
        status_code=404,
    )


def render_error(request: Request, message: str, back_url: str = "/", back_label: str = "Home"):
    return render(
        request,
        "error.html",
        {"message": message, "back_url": back_url, "back_label": back_label},
        status_code=500,
    )
